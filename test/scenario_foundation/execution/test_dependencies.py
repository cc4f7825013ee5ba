"""
Unit Tests for the Dependency Graph

Tests token resolution (``${class}``/``${package}`` markers) and the
satisfaction rule: a prerequisite is satisfied only once it passed.
"""

import pytest

from scenario_foundation.common.errors import InvalidArgumentError
from scenario_foundation.execution import (
    DependencyResolver,
    OutcomeRegistry,
    TestId,
    TestOutcome,
    resolve_dependency,
)

RUNNING = TestId("acme.scenario", "StepA02_Navigation", "test03_CheckTitle")


class TestResolveDependency:

    @pytest.mark.parametrize("token, expected", [
        ("${class}.test01_OpenHome", ("acme.scenario.StepA02_Navigation", "test01_OpenHome")),
        ("${package}.StepA01_Login.test01_Login", ("acme.scenario.StepA01_Login", "test01_Login")),
        ("acme.common.StepZ_Data.test01_Load", ("acme.common.StepZ_Data", "test01_Load")),
        ("  ${class}.test02_Open ", ("acme.scenario.StepA02_Navigation", "test02_Open")),
    ])
    def test_resolution(self, token, expected):
        assert resolve_dependency(token, RUNNING) == expected

    @pytest.mark.parametrize("token", ["test01_Login", "${class}.", ".test01"])
    def test_malformed_token(self, token):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_dependency(token, RUNNING)
        assert exc_info.value.argument == "dependencies"


class TestOutcomeRegistry:

    def test_record_overwrites(self):
        outcomes = OutcomeRegistry()
        outcomes.record(RUNNING, TestOutcome.RUNNING)
        outcomes.record(RUNNING, TestOutcome.PASSED)
        assert outcomes.outcome_of(RUNNING) is TestOutcome.PASSED
        assert outcomes.get(("acme.scenario.StepA02_Navigation", "test03_CheckTitle")) is TestOutcome.PASSED
        assert len(outcomes) == 1

    def test_clear(self):
        outcomes = OutcomeRegistry()
        outcomes.record(RUNNING, TestOutcome.FAILED)
        outcomes.clear()
        assert outcomes.outcome_of(RUNNING) is None


class TestDependencyResolver:

    @pytest.fixture
    def resolver(self):
        outcomes = OutcomeRegistry()
        outcomes.record(TestId("acme.scenario", "StepA02_Navigation", "test01_OpenHome"), TestOutcome.PASSED)
        outcomes.record(TestId("acme.scenario", "StepA02_Navigation", "test02_Failing"), TestOutcome.FAILED)
        outcomes.record(TestId("acme.scenario", "StepA02_Navigation", "test02_Skipped"), TestOutcome.SKIPPED)
        return DependencyResolver(outcomes)

    def test_passed_prerequisite_is_satisfied(self, resolver):
        assert resolver.is_satisfied("${class}.test01_OpenHome", RUNNING)
        assert resolver.first_unsatisfied(RUNNING, ["${class}.test01_OpenHome"]) is None

    @pytest.mark.parametrize("token", [
        "${class}.test02_Failing",
        "${class}.test02_Skipped",
        "${class}.test09_NeverRan",
    ])
    def test_prerequisite_that_did_not_pass(self, resolver, token):
        assert not resolver.is_satisfied(token, RUNNING)

    def test_first_unsatisfied_reports_resolved_name(self, resolver):
        unsatisfied = resolver.first_unsatisfied(
            RUNNING, ["${class}.test01_OpenHome", "${class}.test02_Failing", "${class}.test02_Skipped"]
        )
        assert unsatisfied == "acme.scenario.StepA02_Navigation.test02_Failing"

    def test_token_without_class_part_is_unsatisfied(self, resolver):
        assert resolver.first_unsatisfied(RUNNING, ["test01_OpenHome"]) == "test01_OpenHome"
        assert not resolver.is_satisfied("test01_OpenHome", RUNNING)

    def test_no_dependencies(self, resolver):
        assert resolver.first_unsatisfied(RUNNING, []) is None

    def test_same_method_name_in_other_class_does_not_count(self, resolver):
        other = TestId("acme.scenario", "StepB01_Reports", "test03_CheckTitle")
        assert not resolver.is_satisfied("${class}.test01_OpenHome", other)
