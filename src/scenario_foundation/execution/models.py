"""
Data models of the execution lifecycle: test identity, outcome and record.
"""

from enum import Enum
from typing import Optional

from attr import attrs, attrib


class TestOutcome(str, Enum):
    """Lifecycle state of a test; PASSED, FAILED and SKIPPED are terminal."""
    PENDING = 'pending'
    RUNNING = 'running'
    PASSED = 'passed'
    FAILED = 'failed'
    SKIPPED = 'skipped'

    @property
    def is_terminal(self) -> bool:
        return self in (TestOutcome.PASSED, TestOutcome.FAILED, TestOutcome.SKIPPED)



@attrs(frozen=True)
class TestId:
    """
    Identity of a test: package, step class and test method.

    Example:
        >>> test_id = TestId("acme.scenario", "StepA02_Navigation", "test01_OpenHome")
        >>> test_id.step_class
        'acme.scenario.StepA02_Navigation'
        >>> test_id.full_test_path
        'acme.scenario.StepA02_Navigation.test01_OpenHome'
    """
    package: str = attrib()
    step: str = attrib()
    test: str = attrib()

    @property
    def step_class(self) -> str:
        return f"{self.package}.{self.step}" if self.package else self.step

    @property
    def full_test_path(self) -> str:
        return f"{self.step_class}.{self.test}"

    @property
    def key(self):
        return self.step_class, self.test

    def __str__(self) -> str:
        return f"{self.step}.{self.test}"

    @classmethod
    def parse(cls, full_test_path: str) -> "TestId":
        """Split 'package.Step.test' into its parts; the package may be empty."""
        parts = full_test_path.split('.')
        if len(parts) < 2:
            raise ValueError(f"'{full_test_path}' is not of the form [package.]Step.test")
        return cls('.'.join(parts[:-2]), parts[-2], parts[-1])


@attrs(slots=False)
class TestRecord:
    """
    What happened to one test.

    Attributes:
        test_id: The test
        outcome: Final outcome
        reason: Skip reason or failure message
        error: The error raised to the caller for a failed test
        duration: Seconds spent running the body (reruns included)
        attempts: Number of times the body was invoked
    """
    test_id: TestId = attrib()
    outcome: TestOutcome = attrib(default=TestOutcome.PENDING)
    reason: Optional[str] = attrib(default=None)
    error: Optional[BaseException] = attrib(default=None, eq=False)
    duration: float = attrib(default=0.0)
    attempts: int = attrib(default=0)

    @property
    def passed(self) -> bool:
        return self.outcome is TestOutcome.PASSED

    @property
    def failed(self) -> bool:
        return self.outcome is TestOutcome.FAILED

    @property
    def skipped(self) -> bool:
        return self.outcome is TestOutcome.SKIPPED


# Not pytest test classes, despite their names
TestOutcome.__test__ = False
TestId.__test__ = False
TestRecord.__test__ = False
