"""
Exception hierarchy for the scenario execution core.

All exceptions inherit from ScenarioError so callers can catch core errors at
any granularity. Timeout-class errors (element waits, busy indicators,
workaround escalations) all derive from WaitElementTimeoutError so a single
handler can treat them as one kind of transient UI failure.
"""

from typing import Any, Optional

from .constants import KNOWN_ISSUE_NOTE


class ScenarioError(Exception):
    """Base exception for scenario execution errors."""

    pass


class InvalidArgumentError(ScenarioError, ValueError):
    """Raised when an operation receives an argument it cannot accept."""

    def __init__(self, message: str, argument: Optional[str] = None):
        self.argument = argument
        super().__init__(message)


class NoApplicationFoundError(ScenarioError):
    """Raised when no application of the topology owns the given location."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Cannot find any application for location '{location}'")


class BrowserError(ScenarioError):
    """Raised when the browser session reports an error or became unusable."""

    pass


class WaitElementTimeoutError(ScenarioError):
    """Raised when an element wait did not succeed before its deadline.

    Attributes:
        locator: The locator (or description of locators) being waited for
        timeout: The configured timeout in seconds
        elapsed: The time actually spent waiting, in seconds
    """

    def __init__(
        self,
        message: str,
        locator: Any = None,
        timeout: Optional[float] = None,
        elapsed: Optional[float] = None,
    ):
        self.locator = locator
        self.timeout = timeout
        self.elapsed = elapsed
        super().__init__(message)

    @classmethod
    def for_locator(cls, locator: Any, timeout: float, elapsed: float) -> "WaitElementTimeoutError":
        return cls(
            f"Timeout while waiting for '{locator}'. "
            f"Took longer than '{timeout}' seconds (waited {elapsed:.1f}s).",
            locator=locator,
            timeout=timeout,
            elapsed=elapsed,
        )


class PageBusyTimeoutError(WaitElementTimeoutError):
    """Raised when a busy or skeleton indicator is still displayed after the timeout."""

    def __init__(self, scope: str, timeout: float, elapsed: float):
        self.scope = scope
        super().__init__(
            f"{scope} was undergoing an operation which did not finish "
            f"before timeout '{timeout}s'",
            timeout=timeout,
            elapsed=elapsed,
        )


class WorkaroundEscalationError(WaitElementTimeoutError):
    """Raised when a workaround is requested twice for the same page location.

    The first occurrence of a transient defect on a page is worked around;
    a recurrence on the same location is escalated as a real failure.
    """

    def __init__(self, message: str, location: str):
        self.location = location
        super().__init__(message, locator=location)


class MultipleVisibleElementsError(ScenarioError):
    """Raised when a single-element wait finds more than one displayed match."""

    def __init__(self, locator: Any, count: int):
        self.locator = locator
        self.count = count
        super().__init__(
            f"Unexpected multiple elements found for '{locator}' "
            f"({count} displayed matches, expected exactly one)"
        )


class DependencySkip(ScenarioError):
    """Control-flow signal raised when a prerequisite test did not pass.

    It never reaches the caller of ``ScenarioExecution.run_test``; the test
    is recorded as skipped with this error's message as reason.
    """

    def __init__(self, dependency: str, reason: Optional[str] = None):
        self.dependency = dependency
        super().__init__(
            reason
            or (
                f"Passing of test '{dependency}' was a prerequisite for this test, "
                f"but the dependent test failed, was skipped or did not run"
            )
        )


class KnownIssueError(ScenarioError):
    """A failure recognized as a tracked known issue.

    Wraps the original exception instead of rebuilding one of the same type:
    ``cause`` keeps the original exception (and its traceback), the message is
    the original message with the tracking note appended.

    Attributes:
        cause: The original exception raised by the test body
        tracking_id: The defect tracking identifier from the known-issues registry
        original_type: The type of the original exception

    Example:
        >>> err = KnownIssueError(AssertionError("Title mismatch"), "DEF-42")
        >>> str(err)
        'Title mismatch. This is a known issue and tracked by DEF-42'
    """

    def __init__(self, cause: BaseException, tracking_id: str):
        self.cause = cause
        self.tracking_id = tracking_id
        self.original_type = type(cause)
        super().__init__(f"{cause}. {KNOWN_ISSUE_NOTE} {tracking_id}")


class ScenarioFailedError(ScenarioError):
    """Raised when a scenario step detects an unrecoverable inconsistency."""

    pass
