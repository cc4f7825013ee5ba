"""
Property Tests for Known-Issue Triage

For any failing test, the caller receives either the original error object
(unknown issue) or a KnownIssueError whose cause is that object (known issue),
and the step delay is slept exactly once either way.
"""

from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings, strategies as st

from scenario_foundation.common.errors import KnownIssueError
from scenario_foundation.config import ScenarioConfig
from scenario_foundation.execution import KnownIssues, ScenarioExecution, TestId

ERROR_TYPES = [AssertionError, KeyError, RuntimeError, ValueError]

identifiers = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,11}", fullmatch=True)


@settings(max_examples=100, deadline=None)
@given(
    step=identifiers,
    test=identifiers,
    error_type=st.sampled_from(ERROR_TYPES),
    message=st.text(max_size=40),
    tracked=st.booleans(),
    delay=st.integers(min_value=0, max_value=5),
)
def test_failure_reaches_caller_once(step, test, error_type, message, tracked, delay):
    test_id = TestId("acme.scenario", step, test)
    issues = {test_id.full_test_path: "DEF-42"} if tracked else {}
    execution = ScenarioExecution(
        ScenarioConfig(stepDelay=delay),
        known_issues=KnownIssues(issues),
        sleep=MagicMock(),
    )
    error = error_type(message)

    def body():
        raise error

    with pytest.raises(Exception) as exc_info:
        execution.run_test(test_id, [], body)

    raised = exc_info.value
    if tracked:
        assert isinstance(raised, KnownIssueError)
        assert raised.cause is error
        assert raised.tracking_id == "DEF-42"
        assert str(raised).endswith("This is a known issue and tracked by DEF-42")
    else:
        assert raised is error

    if delay > 0:
        execution.sleep.assert_called_once_with(delay)
    else:
        execution.sleep.assert_not_called()
