"""
Workaround Escalation Ledger

Some product defects are transient: a page occasionally renders in a bad state
and a reload fixes it. The scenario works around such a defect once per page
location. If the same defect shows up again on a location already worked
around, it is no longer considered transient and the workaround escalates to
a failure.

The ledger is a per-run object: every ScenarioExecution owns one, so two runs
never share workaround history.

Components:
- WorkaroundPage / WorkaroundDialog: What the ledger needs from a page and a dialog
- WorkaroundRecord: Audit entry of one workaround
- WorkaroundLedger: Records worked-around locations and escalates recurrences
- normalize_location: Default location key (no query string, no fragment)
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol, Set, runtime_checkable
from urllib.parse import urlsplit, urlunsplit

from attr import attrs, attrib

from ..common.constants import WORKAROUND_LOG_PREFIX, WORKAROUND_TIMESTAMP_FORMAT
from ..common.errors import WorkaroundEscalationError

logger = logging.getLogger(__name__)


@runtime_checkable
class WorkaroundPage(Protocol):
    def current_location(self) -> str:
        ...

    def perform_corrective_action(self) -> Any:
        ...


@runtime_checkable
class WorkaroundDialog(Protocol):
    def cancel(self) -> Any:
        ...


def normalize_location(location: str) -> str:
    """
    Key identifying a page location across visits.

    Query string and fragment carry per-visit state (ids, tokens, anchors)
    and are dropped, as is a trailing slash. Scheme and host are lower-cased.

    Example:
        >>> normalize_location("HTTPS://Host:9443/app/page/?session=42#top")
        'https://host:9443/app/page'
    """
    parts = urlsplit(location)
    if not parts.scheme:
        return location.split('?', 1)[0].split('#', 1)[0].rstrip('/')
    path = parts.path.rstrip('/')
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, '', ''))


@attrs(frozen=True)
class WorkaroundRecord:
    """
    Audit entry of one applied workaround.

    Attributes:
        location: Normalized location the workaround was applied on
        message: What went wrong
        should_fail: Whether a recurrence on the location escalates to a failure
        created_at: When the workaround was applied
    """
    location: str = attrib()
    message: str = attrib()
    should_fail: bool = attrib(default=True)
    created_at: datetime = attrib(factory=datetime.now)

    @property
    def timestamp(self) -> str:
        return self.created_at.strftime(WORKAROUND_TIMESTAMP_FORMAT)

    @property
    def kind(self) -> str:
        return "failure" if self.should_fail else "normal"

    def __str__(self) -> str:
        return (
            f"{WORKAROUND_LOG_PREFIX}time creation={self.timestamp}, "
            f"message='{self.message}', kind={self.kind}, location={self.location}"
        )


@attrs(slots=False)
class WorkaroundLedger:
    """
    Per-run record of the page locations a workaround was applied on.

    Attributes:
        normalizer: Turns a page location into the key identifying it
        snapshot: Optional hook called with each record (e.g. to save a screenshot)
        clock: Returns the current time for new records

    Example:
        >>> ledger = WorkaroundLedger()
        >>> ledger.apply(page, "Table did not render")   # first time: page refreshed
        >>> ledger.apply(page, "Table did not render")   # same location: escalates
        Traceback (most recent call last):
        ...
        WorkaroundEscalationError: Table did not render
    """
    normalizer: Callable[[str], str] = attrib(default=normalize_location)
    snapshot: Optional[Callable[[WorkaroundRecord], Any]] = attrib(default=None)
    clock: Callable[[], datetime] = attrib(default=datetime.now)
    _locations: Set[str] = attrib(factory=set, init=False)
    _records: List[WorkaroundRecord] = attrib(factory=list, init=False)

    @property
    def records(self) -> List[WorkaroundRecord]:
        return list(self._records)

    @property
    def locations(self) -> Set[str]:
        return set(self._locations)

    def has_workaround(self, location: str) -> bool:
        return self.normalizer(location) in self._locations

    def apply(
        self,
        page: WorkaroundPage,
        message: str,
        should_fail: bool = True,
        corrective_action: Optional[Callable[[], Any]] = None,
        dialog: Optional[WorkaroundDialog] = None,
    ) -> Any:
        """
        Work around a transient defect on the page, or escalate a recurrence.

        Args:
            page: The page showing the defect
            message: Description of the defect
            should_fail: Escalate if this location was already worked around
            corrective_action: What fixes the page; page.perform_corrective_action when None
            dialog: Dialog open on the page, cancelled before escalating

        Returns:
            Whatever the corrective action returns

        Raises:
            WorkaroundEscalationError: If should_fail and the location was already worked around
        """
        location = self.normalizer(page.current_location())
        if should_fail and location in self._locations:
            logger.error(f"{WORKAROUND_LOG_PREFIX}{message} (already applied on '{location}', escalating)")
            if dialog is not None:
                dialog.cancel()
            raise WorkaroundEscalationError(message, location)

        record = WorkaroundRecord(location, message, should_fail, created_at=self.clock())
        self._locations.add(location)
        self._records.append(record)
        logger.warning(str(record))
        if self.snapshot is not None:
            self.snapshot(record)

        action = corrective_action if corrective_action is not None else page.perform_corrective_action
        return action()

    def clear(self):
        self._locations.clear()
        self._records.clear()
