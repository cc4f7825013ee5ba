"""
Common building blocks shared by every subsystem of the scenario core:
the exception hierarchy and the shared constants.
"""

from .constants import (
    BROWSER_CRASH_MESSAGES,
    CLASS_TOKEN,
    DEFAULT_KNOWN_ISSUES_FILE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RERUN_THRESHOLD,
    PACKAGE_TOKEN,
    WORKAROUND_TIMESTAMP_FORMAT,
    is_browser_crash,
)
from .errors import (
    BrowserError,
    DependencySkip,
    InvalidArgumentError,
    KnownIssueError,
    MultipleVisibleElementsError,
    NoApplicationFoundError,
    PageBusyTimeoutError,
    ScenarioError,
    ScenarioFailedError,
    WaitElementTimeoutError,
    WorkaroundEscalationError,
)

__all__ = [
    # Constants
    'BROWSER_CRASH_MESSAGES',
    'CLASS_TOKEN',
    'DEFAULT_KNOWN_ISSUES_FILE',
    'DEFAULT_POLL_INTERVAL',
    'DEFAULT_RERUN_THRESHOLD',
    'PACKAGE_TOKEN',
    'WORKAROUND_TIMESTAMP_FORMAT',
    'is_browser_crash',
    # Errors
    'BrowserError',
    'DependencySkip',
    'InvalidArgumentError',
    'KnownIssueError',
    'MultipleVisibleElementsError',
    'NoApplicationFoundError',
    'PageBusyTimeoutError',
    'ScenarioError',
    'ScenarioFailedError',
    'WaitElementTimeoutError',
    'WorkaroundEscalationError',
]
