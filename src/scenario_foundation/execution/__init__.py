"""
Scenario execution lifecycle: test identity and outcomes, dependency gating,
transient-failure reruns, known-issue triage and step pacing.

Example usage:
    from scenario_foundation.config import ScenarioConfig
    from scenario_foundation.execution import ScenarioExecution, ScenarioStep, depends_on

    class StepA01_Login(ScenarioStep):
        def test01_Login(self):
            ...

        @depends_on("${class}.test01_Login")
        def test02_OpenDashboard(self):
            ...

    with ScenarioExecution(ScenarioConfig.load_from_file("scenario.json")) as execution:
        records = execution.run_step(StepA01_Login(execution))
"""

from .dependencies import DependencyResolver, OutcomeRegistry, resolve_dependency
from .known_issues import KnownIssues, parse_properties
from .models import TestId, TestOutcome, TestRecord
from .rerun import Blemishes, FailureCategory, classify_failure
from .scenario_execution import ScenarioExecution, format_duration
from .step import (
    ScenarioStep,
    TestMarks,
    depends_on,
    get_test_marks,
    mandatory,
    not_rerunnable,
)

__all__ = [
    # Models
    'TestId',
    'TestOutcome',
    'TestRecord',
    # Dependency graph
    'DependencyResolver',
    'OutcomeRegistry',
    'resolve_dependency',
    # Known issues
    'KnownIssues',
    'parse_properties',
    # Reruns
    'Blemishes',
    'FailureCategory',
    'classify_failure',
    # Lifecycle
    'ScenarioExecution',
    'format_duration',
    # Steps
    'ScenarioStep',
    'TestMarks',
    'depends_on',
    'get_test_marks',
    'mandatory',
    'not_rerunnable',
]
