"""
Unit Tests for the Rerun Policy

Tests the classification of failures into transient categories and the
per-category thresholds.
"""

import pytest
from selenium.common.exceptions import StaleElementReferenceException

from scenario_foundation.common.errors import (
    BrowserError,
    MultipleVisibleElementsError,
    PageBusyTimeoutError,
    ScenarioFailedError,
    WaitElementTimeoutError,
    WorkaroundEscalationError,
)
from scenario_foundation.config import ScenarioConfig
from scenario_foundation.execution import Blemishes, FailureCategory, classify_failure


class TestClassifyFailure:

    @pytest.mark.parametrize("error, expected", [
        (WaitElementTimeoutError("late"), FailureCategory.TIMEOUTS),
        (PageBusyTimeoutError("Page", 30, 30.2), FailureCategory.TIMEOUTS),
        (MultipleVisibleElementsError("css=.row", 2), FailureCategory.MULTIPLES),
        (BrowserError("no such window"), FailureCategory.BROWSER_ERRORS),
        (StaleElementReferenceException("stale"), FailureCategory.BROWSER_ERRORS),
        (ScenarioFailedError("inconsistent"), FailureCategory.FAILURES),
        (WorkaroundEscalationError("again", "https://h:1/app"), None),
        (AssertionError("mismatch"), None),
        (KeyError("bug"), None),
    ])
    def test_classification(self, error, expected):
        assert classify_failure(error) is expected


class TestBlemishes:

    def test_default_threshold_allows_one_rerun(self):
        blemishes = Blemishes()
        assert blemishes.register(FailureCategory.TIMEOUTS) is True
        assert blemishes.register(FailureCategory.TIMEOUTS) is False

    def test_categories_are_counted_separately(self):
        blemishes = Blemishes()
        assert blemishes.register(FailureCategory.TIMEOUTS)
        assert blemishes.register(FailureCategory.MULTIPLES)
        assert blemishes.total == 2

    def test_from_config(self):
        config = ScenarioConfig(timeoutsThreshold=3, multiplesThreshold=1)
        blemishes = Blemishes.from_config(config)
        assert blemishes.threshold(FailureCategory.TIMEOUTS) == 3
        assert blemishes.threshold(FailureCategory.FAILURES) == 2
        assert blemishes.register(FailureCategory.MULTIPLES) is False
        assert blemishes.register(FailureCategory.TIMEOUTS) is True
        assert blemishes.register(FailureCategory.TIMEOUTS) is True
        assert blemishes.register(FailureCategory.TIMEOUTS) is False
