"""
Run configuration and timeout policy of the scenario core.

Example usage:
    from scenario_foundation.config import ScenarioConfig

    config = ScenarioConfig.load_from_file("scenario.json")
    timeouts = config.timeouts()
    timeouts.open_page  # 30s, scaled by the performance profile
"""

from .settings import ApplicationSettings, ScenarioConfig, UserSettings
from .timeouts import Performance, TimeoutCategory, Timeouts

__all__ = [
    'ApplicationSettings',
    'Performance',
    'ScenarioConfig',
    'TimeoutCategory',
    'Timeouts',
    'UserSettings',
]
