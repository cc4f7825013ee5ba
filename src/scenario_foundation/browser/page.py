"""
Base page bound to a browser session.

Concrete page objects subclass BrowserPage and add their own locators and
actions. The base class provides what the rest of the scenario core expects
from a page: its current location, a corrective action used by workarounds,
and synchronization helpers.
"""

import logging
from typing import Any, List, Optional, Sequence

from attr import attrs, attrib

from .locators import DEFAULT_BUSY_INDICATORS, Locator
from .session import BrowserSession

logger = logging.getLogger(__name__)


@attrs(slots=False)
class BrowserPage:
    """
    Page object base class.

    Attributes:
        session: The browser session displaying the page
        busy_indicators: Locators of the elements telling the page is still loading
    """
    session: BrowserSession = attrib()
    busy_indicators: List[Locator] = attrib(factory=lambda: list(DEFAULT_BUSY_INDICATORS))

    def current_location(self) -> str:
        return self.session.driver.current_url

    def refresh(self):
        logger.info(f"Refreshing page {self.current_location()}")
        self.session.refresh()
        self.wait_while_busy()

    def perform_corrective_action(self) -> Any:
        """Default workaround for a page in a bad state: reload it."""
        self.refresh()
        return None

    def wait_for_element(self, locator: Locator, **kwargs) -> Optional[Any]:
        return self.session.waiter.wait_for_element(locator, **kwargs)

    def wait_while_busy(self, dialog: Optional[Any] = None, timeout: Optional[float] = None,
                        locators: Optional[Sequence[Locator]] = None) -> bool:
        """Wait until the page, or the given dialog element, shows no busy indicator."""
        return self.session.waiter.wait_while_busy(
            scope=dialog,
            locators=self.busy_indicators if locators is None else locators,
            timeout=timeout,
            label=type(self).__name__ if dialog is None else None,
        )
