"""
End-to-End Walkthrough of a Scenario Run

Three applications, two of them on the same server. A login step establishes
the session on host1; a navigation step works around a transient page defect,
sees the workaround escalate on recurrence, hits a tracked known issue and
skips the test depending on the escalated one. The step delay is slept after
every test body that ran, known issue included.
"""

from unittest.mock import MagicMock

import pytest

from conftest import FakeDriver
from scenario_foundation.browser import BrowserPage, BrowserSession
from scenario_foundation.common.errors import KnownIssueError, WorkaroundEscalationError
from scenario_foundation.config import ScenarioConfig
from scenario_foundation.execution import (
    KnownIssues,
    ScenarioExecution,
    ScenarioStep,
    TestOutcome,
    depends_on,
    mandatory,
)
from scenario_foundation.topology import Topology

APP1 = "https://host1:1/app1"
APP2 = "https://host1:1/app2"
APP3 = "https://host2:2/app3"


class StepA01_Login(ScenarioStep):
    package = "acme.scenario"

    @mandatory
    def test01_Login(self):
        user = self.execution.get_user("alice")
        location = self.data["page"].current_location()
        assert self.topology.need_login(location, user)
        assert self.topology.login(location, user)

    @depends_on("${class}.test01_Login")
    def test02_CheckServerMates(self):
        user = self.execution.get_user("alice")
        assert not self.topology.need_login(f"{APP2}/reports", user)
        assert self.topology.need_login(APP3, user)


class StepA02_Navigation(ScenarioStep):
    package = "acme.scenario"

    @depends_on("${package}.StepA01_Login.test01_Login")
    def test01_OpenHome(self):
        self.apply_workaround(self.data["page"], "Home table did not render")

    def test02_Reload(self):
        self.apply_workaround(self.data["page"], "Home table did not render")

    def test03_CheckTitle(self):
        assert self.data["page"].current_location().endswith("/dashboard"), "Unexpected page title"

    @depends_on("${class}.test02_Reload")
    def test04_Export(self):
        self.data["exported"] = True


@pytest.fixture
def driver():
    return FakeDriver(current_url=f"{APP1}/home?session=1")


@pytest.fixture
def execution(driver):
    config = ScenarioConfig(
        stepDelay=2,
        applications=[{"url": APP1}, {"url": APP2}, {"url": APP3}],
        users=[{"id": "alice", "passwd": "secret"}],
    )
    topology = Topology.from_config(config)
    execution = ScenarioExecution(
        config,
        topology=topology,
        session=BrowserSession(lambda: driver, topology=topology),
        known_issues=KnownIssues({"acme.scenario.StepA02_Navigation.test03_CheckTitle": "DEF-1234"}),
        sleep=MagicMock(),
    )
    with execution:
        execution.data["page"] = BrowserPage(execution.session)
        yield execution


def outcomes(records):
    return [(record.test_id.test, record.outcome) for record in records]


def test_login_propagates_to_server_mates(execution):
    records = execution.run_step(StepA01_Login(execution))

    assert outcomes(records) == [
        ("test01_Login", TestOutcome.PASSED),
        ("test02_CheckServerMates", TestOutcome.PASSED),
    ]
    assert execution.topology.get_logged_user(APP2).id == "alice"
    assert execution.topology.get_logged_user(APP3) is None


def test_full_scenario(execution, driver):
    execution.run_step(StepA01_Login(execution))
    records = execution.run_step(StepA02_Navigation(execution))

    assert outcomes(records) == [
        ("test01_OpenHome", TestOutcome.PASSED),
        ("test02_Reload", TestOutcome.FAILED),
        ("test03_CheckTitle", TestOutcome.FAILED),
        ("test04_Export", TestOutcome.SKIPPED),
    ]

    # The first workaround reloaded the page, the recurrence escalated
    assert driver.refresh_count == 1
    assert isinstance(records[1].error, WorkaroundEscalationError)
    assert records[1].attempts == 1

    known = records[2].error
    assert isinstance(known, KnownIssueError)
    assert known.tracking_id == "DEF-1234"
    assert str(known) == "Unexpected page title. This is a known issue and tracked by DEF-1234"

    assert "exported" not in execution.data
    assert "acme.scenario.StepA02_Navigation.test02_Reload" in records[3].reason

    # Two login tests and three navigation tests ran a body
    assert execution.sleep.call_count == 5
    assert all(call.args == (2,) for call in execution.sleep.call_args_list)


def test_new_session_logs_out_every_application(execution, driver):
    execution.run_step(StepA01_Login(execution))
    execution.session.new_session()

    assert driver.quit_count == 1
    assert all(app.user is None for app in execution.topology.applications)


def test_browser_released_at_teardown(driver):
    config = ScenarioConfig(applications=[{"url": APP1}])
    session = BrowserSession(lambda: driver)
    with ScenarioExecution(config, session=session, known_issues=KnownIssues(), sleep=MagicMock()):
        assert session.is_active
    assert not session.is_active
    assert driver.quit_count == 1
