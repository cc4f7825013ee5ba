"""
Timeout Policy

Supplies the wait durations used throughout the scenario core. Every category
has a base duration scaled by the environment's performance multiplier, so a
slow test environment stretches all waits uniformly. Explicit per-category
overrides are taken as given and are not scaled.

Components:
- Performance: Enum of environment speed profiles (multiplier 1, 2 or 3)
- TimeoutCategory: Enum of the duration categories and their parameter names
- Timeouts: The policy object resolving a category to seconds
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from attr import attrs, attrib

from ..common.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Performance(int, Enum):
    """Speed profile of the environment under test; the value is the multiplier."""
    AVERAGE = 1
    SLOW = 2
    SNAIL = 3

    @classmethod
    def parse(cls, value: Any) -> "Performance":
        if isinstance(value, Performance):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                value = int(text)
            else:
                try:
                    return cls[text.upper()]
                except KeyError:
                    raise InvalidArgumentError(
                        f"Unknown performance profile '{value}'", argument="performance"
                    ) from None
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown performance profile '{value}'", argument="performance"
            ) from None


class TimeoutCategory(str, Enum):
    """Duration categories; values are the parameter names of their overrides."""
    DEFAULT = 'timeout'
    SHORT = 'timeoutShort'
    TINY = 'timeoutTiny'
    OPEN_PAGE = 'timeoutToOpenPage'
    CLOSE_DIALOG = 'timeoutCloseDialog'
    DOWNLOAD_START = 'timeoutDownloadStart'


# Base durations in seconds, before scaling
BASE_TIMEOUTS: Dict[TimeoutCategory, int] = {
    TimeoutCategory.DEFAULT: 60,
    TimeoutCategory.SHORT: 10,
    TimeoutCategory.OPEN_PAGE: 30,
    TimeoutCategory.DOWNLOAD_START: 120,
}


@attrs(slots=True)
class Timeouts:
    """
    Timeout policy scaled by the environment performance.

    Attributes:
        performance: The environment speed profile
        overrides: Per-category durations in seconds that replace the scaled defaults

    Example:
        >>> timeouts = Timeouts(performance=Performance.SLOW)
        >>> timeouts.default
        120
        >>> timeouts.tiny
        1
        >>> Timeouts(overrides={TimeoutCategory.SHORT: 3}).short
        3
    """
    performance: Performance = attrib(default=Performance.AVERAGE, converter=Performance.parse)
    overrides: Dict[TimeoutCategory, float] = attrib(factory=dict)

    @property
    def multiplier(self) -> int:
        return self.performance.value

    def get(self, category: TimeoutCategory) -> float:
        """Return the duration in seconds of the given category."""
        category = TimeoutCategory(category)
        if category in self.overrides:
            return self.overrides[category]
        if category is TimeoutCategory.TINY:
            # Only slow environments need any slack on "immediate" checks
            return 1 if self.performance is Performance.SLOW else 0
        if category is TimeoutCategory.CLOSE_DIALOG:
            return self.get(TimeoutCategory.OPEN_PAGE)
        return BASE_TIMEOUTS[category] * self.multiplier

    # region named accessors
    @property
    def default(self) -> float:
        return self.get(TimeoutCategory.DEFAULT)

    @property
    def short(self) -> float:
        return self.get(TimeoutCategory.SHORT)

    @property
    def tiny(self) -> float:
        return self.get(TimeoutCategory.TINY)

    @property
    def open_page(self) -> float:
        return self.get(TimeoutCategory.OPEN_PAGE)

    @property
    def close_dialog(self) -> float:
        return self.get(TimeoutCategory.CLOSE_DIALOG)

    @property
    def download_start(self) -> float:
        return self.get(TimeoutCategory.DOWNLOAD_START)
    # endregion

    def as_dict(self) -> Dict[str, float]:
        return {category.value: self.get(category) for category in TimeoutCategory}

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> "Timeouts":
        """
        Build a policy from a flat parameter map.

        Recognized keys are ``performance`` and the TimeoutCategory values
        (``timeout``, ``timeoutShort``, ...). Other keys are ignored.

        Raises:
            InvalidArgumentError: If a value is not a number or a known profile
        """
        performance = parameters.get('performance', Performance.AVERAGE)
        overrides: Dict[TimeoutCategory, float] = {}
        for category in TimeoutCategory:
            raw: Optional[Any] = parameters.get(category.value)
            if raw is None or raw == '':
                continue
            try:
                overrides[category] = float(raw) if not isinstance(raw, int) else raw
            except (TypeError, ValueError):
                raise InvalidArgumentError(
                    f"Timeout parameter '{category.value}' must be a number, got '{raw}'",
                    argument=category.value,
                ) from None
        timeouts = cls(performance=performance, overrides=overrides)
        logger.debug(f"[Timeouts.from_parameters] resolved timeouts: {timeouts.as_dict()}")
        return timeouts
