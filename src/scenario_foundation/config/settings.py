"""
Scenario Run Configuration

Pydantic models describing how a scenario run is configured: the topology of
applications under test, the users, the timeout overrides, the pacing delay
and the failure policy of the execution lifecycle.

Field aliases are the camelCase run parameter names
(``stepDelay``, ``knownIssuesFile``, ``stopOnFailure``...) so that a flat
parameter map, environment variables or a JSON file can be loaded unchanged.
Python field names are accepted as well.

Example:
    >>> config = ScenarioConfig.from_parameters({
    ...     "stepDelay": "2",
    ...     "performance": "SLOW",
    ...     "timeoutShort": "5",
    ... })
    >>> config.step_delay
    2.0
    >>> config.timeouts().short
    5.0
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from ..common.constants import (
    DEFAULT_KNOWN_ISSUES_FILE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RERUN_THRESHOLD,
)
from .timeouts import Performance, TimeoutCategory, Timeouts

logger = logging.getLogger(__name__)

ENV_PREFIX = "SCENARIO_"

# Fields that cannot be given as a single environment variable
_STRUCTURED_FIELDS = ("timeout_overrides", "applications", "users")


class ApplicationSettings(BaseModel):
    """One application of the topology: its URL and the server hosting it."""
    url: str
    name: Optional[str] = None
    server: Optional[str] = None  # Defaults to the URL authority

    class Config:
        extra = 'ignore'


class UserSettings(BaseModel):
    """Credentials of a user the scenario logs in with."""
    id: str
    name: Optional[str] = None
    password: Optional[str] = Field(default=None, alias='passwd')
    email: Optional[str] = None

    class Config:
        extra = 'ignore'
        populate_by_name = True


class ScenarioConfig(BaseModel):
    """
    Configuration of one scenario run.

    Attributes:
        performance: Environment speed profile scaling every timeout
        timeout_overrides: Per-category timeouts in seconds (keys are the category parameter names)
        step_delay: Seconds to pause after each test body, 0 disables pacing
        known_issues_file: Properties file mapping full test paths to tracking ids
        artifacts_dir: Directory holding the known-issues file and run artifacts
        stop_on_failure: Stop running further tests after the first failure
        stop_on_exception: Stop after the first unexpected exception (defaults to stop_on_failure)
        failures_threshold: Reruns allowed for generic failures before giving up
        timeouts_threshold: Reruns allowed for element wait timeouts
        multiples_threshold: Reruns allowed for ambiguous locators
        browser_errors_threshold: Reruns allowed for browser errors
        verify_dependencies: Gate tests on the outcome of their prerequisites
        verify_dependencies_only: Only gate tests, never run their bodies
        close_browser_on_exit: Release the browser session when the run finishes
        poll_interval: Seconds between two polls of an element wait
        applications: Applications of the topology
        users: Users available to the scenario
    """
    performance: Performance = Performance.AVERAGE
    timeout_overrides: Dict[str, float] = Field(default_factory=dict, alias='timeouts')

    step_delay: float = Field(default=0, alias='stepDelay', ge=0)
    known_issues_file: str = Field(default=DEFAULT_KNOWN_ISSUES_FILE, alias='knownIssuesFile')
    artifacts_dir: Optional[str] = Field(default=None, alias='artifactsDir')

    stop_on_failure: bool = Field(default=False, alias='stopOnFailure')
    stop_on_exception: Optional[bool] = Field(default=None, alias='stopOnException')

    failures_threshold: int = Field(default=DEFAULT_RERUN_THRESHOLD, alias='failuresThreshold', ge=1)
    timeouts_threshold: int = Field(default=DEFAULT_RERUN_THRESHOLD, alias='timeoutsThreshold', ge=1)
    multiples_threshold: int = Field(default=DEFAULT_RERUN_THRESHOLD, alias='multiplesThreshold', ge=1)
    browser_errors_threshold: int = Field(
        default=DEFAULT_RERUN_THRESHOLD, alias='browserErrorsThreshold', ge=1
    )

    verify_dependencies: bool = Field(default=True, alias='verifyDependencies')
    verify_dependencies_only: bool = Field(default=False, alias='verifyDependenciesOnly')
    close_browser_on_exit: bool = Field(default=True, alias='closeBrowserOnExit')
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, alias='pollInterval', gt=0)

    applications: List[ApplicationSettings] = Field(default_factory=list)
    users: List[UserSettings] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        extra = 'ignore'
        populate_by_name = True

    @field_validator('performance', mode='before')
    @classmethod
    def normalize_performance(cls, v):
        """Accept profile names ("SLOW") as well as multipliers."""
        return Performance.parse(v)

    @field_validator('timeout_overrides', mode='before')
    @classmethod
    def normalize_timeout_keys(cls, v):
        """Keep only keys naming a timeout category."""
        if v is None:
            return {}
        known = {category.value for category in TimeoutCategory}
        unknown = set(v) - known
        if unknown:
            raise ValueError(f"Unknown timeout categories: {sorted(unknown)}")
        return v

    @property
    def effective_stop_on_exception(self) -> bool:
        if self.stop_on_exception is None:
            return self.stop_on_failure
        return self.stop_on_exception

    def timeouts(self) -> Timeouts:
        """Build the timeout policy of this run."""
        overrides = {TimeoutCategory(key): value for key, value in self.timeout_overrides.items()}
        return Timeouts(performance=self.performance, overrides=overrides)

    def known_issues_path(self) -> Path:
        path = Path(self.known_issues_file)
        if self.artifacts_dir and not path.is_absolute():
            path = Path(self.artifacts_dir) / path
        return path

    def get_user(self, user_id: str) -> Optional[UserSettings]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    # region loaders
    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> "ScenarioConfig":
        """
        Build a configuration from a flat parameter map.

        Timeout parameters (``timeout``, ``timeoutShort``...) are lifted into
        ``timeout_overrides``; every other key is matched against the field
        names and aliases.
        """
        data: Dict[str, Any] = {}
        overrides: Dict[str, Any] = {}
        timeout_keys = {category.value for category in TimeoutCategory}
        for key, value in parameters.items():
            if key in timeout_keys:
                if value not in (None, ''):
                    overrides[key] = value
            else:
                data[key] = value
        if overrides:
            data['timeouts'] = {**(data.get('timeouts') or {}), **overrides}
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, environ: Optional[Mapping[str, str]] = None) -> "ScenarioConfig":
        """
        Build a configuration from environment variables.

        ``SCENARIO_STEP_DELAY=2`` sets ``step_delay``; ``SCENARIO_TIMEOUTSHORT=5``
        sets the ``timeoutShort`` override. Matching is case-insensitive.
        """
        environ = os.environ if environ is None else environ
        scalar_fields = {
            name: field for name, field in cls.model_fields.items() if name not in _STRUCTURED_FIELDS
        }
        by_lower_name = {name.lower(): name for name in scalar_fields}
        by_lower_name.update(
            {field.alias.lower(): field.alias for field in scalar_fields.values() if field.alias}
        )
        by_lower_name.update({category.value.lower(): category.value for category in TimeoutCategory})
        by_lower_name['performance'] = 'performance'

        parameters: Dict[str, Any] = {}
        for key, value in environ.items():
            if not key.upper().startswith(prefix.upper()):
                continue
            name = key[len(prefix):].lower()
            if name in by_lower_name:
                parameters[by_lower_name[name]] = value
            else:
                logger.debug(f"[ScenarioConfig.from_env] ignoring unknown variable '{key}'")
        return cls.from_parameters(parameters)

    @classmethod
    def load_from_file(cls, filepath: str) -> "ScenarioConfig":
        """
        Load a configuration from a JSON file.

        Args:
            filepath: Path to the JSON configuration

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If JSON is invalid
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Scenario configuration file not found: {filepath}")

        with open(path, 'r') as f:
            data = json.load(f)

        return cls.from_parameters(data)
    # endregion
