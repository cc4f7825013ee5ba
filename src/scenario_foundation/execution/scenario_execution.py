"""
Scenario Execution Lifecycle

ScenarioExecution owns everything a scenario run shares between its tests:
the configuration, the topology, the browser session, the scenario data, the
outcome of every test, the workaround ledger and the known-issues registry.
It is a per-run object; nothing of it lives at module level, so several runs
(e.g. in one pytest session) never see each other's state.

Lifecycle of one test (run_test):

    PENDING -> SKIPPED                   scenario stopped, or a prerequisite did not pass
    PENDING -> RUNNING -> PASSED         body returned
    PENDING -> RUNNING -> FAILED         body raised (after transient reruns)

A failed test goes through known-issue triage: a known issue is raised as a
KnownIssueError wrapping the original error, an unknown one re-raises the
original error untouched. After the body ran, the configured step delay is
always slept, whatever the outcome.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from attr import attrs, attrib

from ..browser.session import BrowserSession
from ..common.constants import is_browser_crash
from ..common.errors import DependencySkip, ScenarioError
from ..config.settings import ScenarioConfig
from ..topology.topology import Topology
from ..topology.user import User
from ..workaround.ledger import WorkaroundLedger
from .dependencies import DependencyResolver, OutcomeRegistry
from .known_issues import KnownIssues
from .models import TestId, TestOutcome, TestRecord
from .rerun import Blemishes, FailureCategory, classify_failure
from .step import ScenarioStep, get_test_marks

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes}m{seconds:02d}s"


@attrs(slots=False)
class ScenarioExecution:
    """
    One scenario run.

    Attributes:
        config: Run configuration
        topology: Applications under test; built from the configuration when None
        session: Browser session shared by the tests, optional (see BrowserSession.from_config)
        known_issues: Known-issues registry; loaded from config.known_issues_path() when None
        data: Free-form scenario data shared between steps
        workarounds: Workaround ledger of the run
        outcomes: Outcome of every test of the run
        sleep: Sleep function used for pacing
        clock: Monotonic clock used to time the tests

    Example:
        >>> with ScenarioExecution(ScenarioConfig(stepDelay=1)) as execution:
        ...     execution.run_test(TestId("acme", "StepA01", "test01_Login"), [], login)
        ...     execution.run_test(
        ...         TestId("acme", "StepA01", "test02_Open"),
        ...         ["${class}.test01_Login"],
        ...         open_page,
        ...     )
    """
    config: ScenarioConfig = attrib(factory=ScenarioConfig)
    topology: Optional[Topology] = attrib(default=None)
    session: Optional[BrowserSession] = attrib(default=None)
    known_issues: Optional[KnownIssues] = attrib(default=None)
    data: Dict[str, Any] = attrib(factory=dict)
    workarounds: WorkaroundLedger = attrib(factory=WorkaroundLedger)
    outcomes: OutcomeRegistry = attrib(factory=OutcomeRegistry)
    sleep: Callable[[float], None] = attrib(default=time.sleep)
    clock: Callable[[], float] = attrib(default=time.monotonic)

    resolver: DependencyResolver = attrib(init=False)
    should_stop: bool = attrib(default=False, init=False)
    stop_reason: Optional[str] = attrib(default=None, init=False)
    _records: Dict[tuple, TestRecord] = attrib(factory=dict, init=False)

    def __attrs_post_init__(self):
        if self.topology is None:
            self.topology = Topology.from_config(self.config)
        if self.known_issues is None:
            self.known_issues = KnownIssues.load(self.config.known_issues_path())
        self.resolver = DependencyResolver(self.outcomes)

    # region run lifecycle
    def start(self) -> "ScenarioExecution":
        if self.session is not None:
            self.session.acquire()
        logger.info(f"Scenario execution started ({len(self.topology.applications)} application(s))")
        return self

    def finish(self):
        """End the run; the browser is closed when configured to."""
        if self.session is not None and self.config.close_browser_on_exit:
            try:
                self.session.release()
            except Exception as e:
                logger.warning(f"Cannot close the browser session: {e}")
        passed = sum(1 for record in self._records.values() if record.passed)
        logger.info(f"Scenario execution finished: {passed}/{len(self._records)} test(s) passed")

    def __enter__(self) -> "ScenarioExecution":
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback):
        self.finish()

    @property
    def records(self) -> List[TestRecord]:
        return list(self._records.values())

    def record_of(self, test_id: TestId) -> Optional[TestRecord]:
        return self._records.get(test_id.key)

    def get_user(self, user_id: str) -> Optional[User]:
        settings = self.config.get_user(user_id)
        return User.from_settings(settings) if settings is not None else None
    # endregion

    # region dependency gating
    def verify_dependencies(self, test_id: TestId, dependencies: Iterable[str]):
        """
        Check the prerequisites of a test.

        Raises:
            DependencySkip: If a prerequisite failed, was skipped or did not run
        """
        unsatisfied = self.resolver.first_unsatisfied(test_id, dependencies)
        if unsatisfied is not None:
            raise DependencySkip(unsatisfied)

    def _skip(self, record: TestRecord, reason: str) -> TestRecord:
        record.outcome = TestOutcome.SKIPPED
        record.reason = reason
        self.outcomes.record(record.test_id, TestOutcome.SKIPPED)
        logger.info(f"{record.test_id} -> SKIPPED: {reason}")
        return record
    # endregion

    # region test execution
    def run_test(
        self,
        test_id: TestId,
        dependencies: Iterable[str],
        body: Callable[[], Any],
        *,
        not_rerunnable: bool = False,
        mandatory: bool = False,
        recovery: Optional[Callable[[], Any]] = None,
    ) -> TestRecord:
        """
        Run one test through its lifecycle.

        Args:
            test_id: Identity of the test
            dependencies: Prerequisite tests, ``<class>.<method>`` tokens
            body: The test itself
            not_rerunnable: Never rerun the body after a transient failure
            mandatory: A failure stops every following test of the scenario
            recovery: Brings the page back to a usable state before a rerun;
                      defaults to refreshing the session page

        Returns:
            The record of a passed or skipped test

        Raises:
            KnownIssueError: If the test failed and is a tracked known issue
            Exception: The original error if the test failed for an unknown reason
        """
        record = TestRecord(test_id)
        self._records[test_id.key] = record
        self.outcomes.record(test_id, TestOutcome.PENDING)

        if self.should_stop:
            return self._skip(record, f"Scenario execution was stopped: {self.stop_reason}")
        if self.config.verify_dependencies:
            try:
                self.verify_dependencies(test_id, dependencies)
            except DependencySkip as skip:
                return self._skip(record, str(skip))
        if self.config.verify_dependencies_only:
            logger.info(f"{test_id} -> dependencies verified, test not run")
            record.outcome = TestOutcome.PASSED
            self.outcomes.record(test_id, TestOutcome.PASSED)
            return record

        logger.info(f"start test case {test_id}")
        record.outcome = TestOutcome.RUNNING
        self.outcomes.record(test_id, TestOutcome.RUNNING)
        start = self.clock()
        try:
            self._run_body(record, body, not_rerunnable, recovery)
        except Exception as error:
            record.duration = self.clock() - start
            self._fail(record, error, mandatory)
            known = self.known_issues.triage(test_id, error)
            if known is None:
                record.error = error
                raise
            record.error = known
            raise known from error
        else:
            record.duration = self.clock() - start
            record.outcome = TestOutcome.PASSED
            self.outcomes.record(test_id, TestOutcome.PASSED)
            logger.info(f"{test_id} -> OK (in {format_duration(record.duration)})")
            return record
        finally:
            self._pace(test_id)

    def _run_body(
        self,
        record: TestRecord,
        body: Callable[[], Any],
        not_rerunnable: bool,
        recovery: Optional[Callable[[], Any]],
    ):
        blemishes = Blemishes.from_config(self.config)
        while True:
            record.attempts += 1
            try:
                body()
                return
            except Exception as error:
                category = classify_failure(error)
                if category is None or not_rerunnable:
                    raise
                if not blemishes.register(category):
                    logger.error(
                        f"{record.test_id}: {category.value} threshold "
                        f"({blemishes.threshold(category)}) reached, giving up"
                    )
                    raise
                logger.warning(
                    f"WORKAROUND: Try to run the test again as it failed with "
                    f"{type(error).__name__}: {error}"
                )
                self._recover(category, error, recovery)

    def _recover(self, category: FailureCategory, error: Exception, recovery: Optional[Callable[[], Any]]):
        if recovery is not None:
            recovery()
        elif self.session is not None and self.session.is_active:
            if category is FailureCategory.BROWSER_ERRORS and is_browser_crash(error):
                logger.warning("Browser session lost, opening a new one")
                self.session.new_session()
            else:
                self.session.refresh()

    def _fail(self, record: TestRecord, error: Exception, mandatory: bool):
        record.outcome = TestOutcome.FAILED
        record.reason = str(error)
        self.outcomes.record(record.test_id, TestOutcome.FAILED)
        logger.info(f"{record.test_id} -> KO (in {format_duration(record.duration)}) due to: {error}")

        expected_failure = isinstance(error, (AssertionError, ScenarioError))
        if mandatory:
            self._stop(f"mandatory test {record.test_id} failed")
        elif expected_failure and self.config.stop_on_failure:
            self._stop(f"test {record.test_id} failed")
        elif not expected_failure and self.config.effective_stop_on_exception:
            self._stop(f"test {record.test_id} raised {type(error).__name__}")

    def _stop(self, reason: str):
        self.should_stop = True
        self.stop_reason = reason
        logger.error(f"Stopping scenario execution: {reason}")

    def _pace(self, test_id: TestId):
        delay = self.config.step_delay
        if delay > 0:
            logger.debug(f"[ScenarioExecution._pace] sleeping {delay}s after {test_id}")
            self.sleep(delay)
    # endregion

    def run_step(self, step: ScenarioStep) -> List[TestRecord]:
        """
        Run every test of a step in alphabetical order.

        Failures are recorded and do not prevent the following tests from
        running (they are gated by their own dependencies and the stop policy).

        Returns:
            The records of the step's tests, in execution order
        """
        records = []
        for name, method in step.test_methods():
            marks = get_test_marks(method)
            test_id = step.test_id(name)
            try:
                self.run_test(
                    test_id,
                    marks.dependencies,
                    method,
                    not_rerunnable=marks.not_rerunnable,
                    mandatory=marks.mandatory,
                )
            except Exception as error:
                logger.debug(f"[ScenarioExecution.run_step] {test_id} failed: {error!r}")
            records.append(self.record_of(test_id))
        return records
