"""
Rerun Policy

A UI test may fail for reasons unrelated to the product: an element rendered
late, a locator briefly matched twice during a re-render, the browser lost
its session. Such failures are counted per test and category ("blemishes");
as long as a category stays below its threshold, the page is recovered and
the test body runs again.

Errors that are not transient (assertions, programming errors, workaround
escalations) are never rerun.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from attr import attrs, attrib
from selenium.common.exceptions import WebDriverException

from ..common.constants import DEFAULT_RERUN_THRESHOLD
from ..common.errors import (
    BrowserError,
    MultipleVisibleElementsError,
    ScenarioFailedError,
    WaitElementTimeoutError,
    WorkaroundEscalationError,
)
from ..config.settings import ScenarioConfig

logger = logging.getLogger(__name__)


class FailureCategory(str, Enum):
    """Kinds of transient failures, each with its own rerun threshold."""
    FAILURES = 'failures'
    TIMEOUTS = 'timeouts'
    MULTIPLES = 'multiples'
    BROWSER_ERRORS = 'browser_errors'


def classify_failure(error: BaseException) -> Optional[FailureCategory]:
    """Return the transient category of an error, None if it must not be rerun."""
    if isinstance(error, WorkaroundEscalationError):
        return None
    if isinstance(error, MultipleVisibleElementsError):
        return FailureCategory.MULTIPLES
    if isinstance(error, WaitElementTimeoutError):
        return FailureCategory.TIMEOUTS
    if isinstance(error, (BrowserError, WebDriverException)):
        return FailureCategory.BROWSER_ERRORS
    if isinstance(error, ScenarioFailedError):
        return FailureCategory.FAILURES
    return None


@attrs(slots=False)
class Blemishes:
    """
    Transient failure counters of one test.

    Attributes:
        thresholds: Failures of a category allowed before giving up (the
                    threshold-th failure is final)
        counts: Failures seen so far per category

    Example:
        >>> blemishes = Blemishes.from_config(ScenarioConfig())
        >>> blemishes.register(FailureCategory.TIMEOUTS)   # first timeout: rerun
        True
        >>> blemishes.register(FailureCategory.TIMEOUTS)   # second: give up
        False
    """
    thresholds: Dict[FailureCategory, int] = attrib(factory=dict)
    counts: Dict[FailureCategory, int] = attrib(factory=dict, init=False)

    def threshold(self, category: FailureCategory) -> int:
        return self.thresholds.get(category, DEFAULT_RERUN_THRESHOLD)

    def register(self, category: FailureCategory) -> bool:
        """Count a failure; returns whether the test may run again."""
        self.counts[category] = self.counts.get(category, 0) + 1
        return self.counts[category] < self.threshold(category)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @classmethod
    def from_config(cls, config: ScenarioConfig) -> "Blemishes":
        return cls({
            FailureCategory.FAILURES: config.failures_threshold,
            FailureCategory.TIMEOUTS: config.timeouts_threshold,
            FailureCategory.MULTIPLES: config.multiples_threshold,
            FailureCategory.BROWSER_ERRORS: config.browser_errors_threshold,
        })
