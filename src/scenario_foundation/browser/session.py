"""
Browser Session

A scenario acquires one browser session and keeps it for all of its tests.
It is re-acquired only on an explicit new-session request (for example after
a browser crash) and released at teardown. Acquiring a session always
leaves the frame stack on the top-level document.
"""

import logging
from typing import Callable, Optional

from attr import attrs, attrib

from ..common.errors import BrowserError
from ..config.settings import ScenarioConfig
from ..config.timeouts import Timeouts
from ..common.constants import DEFAULT_POLL_INTERVAL
from ..topology.topology import Topology
from .driver import NavigableDriver
from .frames import FrameStack
from .waits import ElementWaiter

logger = logging.getLogger(__name__)


@attrs(slots=False)
class BrowserSession:
    """
    Lifecycle of the browser used by a scenario.

    Attributes:
        driver_factory: Creates a new driver each time a session is acquired
        timeouts: Timeout policy handed to the session waiter
        topology: When given, every application is logged out on a new session
        poll_interval: Poll interval of the session waiter

    Example:
        >>> with BrowserSession(lambda: SeleniumDriver(webdriver.Chrome())) as session:
        ...     session.waiter.wait_for_element(Locator.id("login"))
    """
    driver_factory: Callable[[], NavigableDriver] = attrib()
    timeouts: Timeouts = attrib(factory=Timeouts)
    topology: Optional[Topology] = attrib(default=None)
    poll_interval: float = attrib(default=DEFAULT_POLL_INTERVAL)

    _driver: Optional[NavigableDriver] = attrib(default=None, init=False)
    _frames: Optional[FrameStack] = attrib(default=None, init=False)
    _waiter: Optional[ElementWaiter] = attrib(default=None, init=False)

    @property
    def is_active(self) -> bool:
        return self._driver is not None

    def _require_active(self):
        if self._driver is None:
            raise BrowserError("No browser session is active, acquire one first")

    @property
    def driver(self) -> NavigableDriver:
        self._require_active()
        return self._driver

    @property
    def frames(self) -> FrameStack:
        self._require_active()
        return self._frames

    @property
    def waiter(self) -> ElementWaiter:
        self._require_active()
        return self._waiter

    @classmethod
    def from_config(
        cls,
        config: ScenarioConfig,
        driver_factory: Callable[[], NavigableDriver],
        topology: Optional[Topology] = None,
    ) -> "BrowserSession":
        """Session whose waiter follows the timeouts and poll interval of the run configuration."""
        return cls(driver_factory, timeouts=config.timeouts(), topology=topology, poll_interval=config.poll_interval)

    def acquire(self) -> NavigableDriver:
        """Open the browser if needed; the frame stack starts on the top-level document."""
        if self._driver is None:
            self._driver = self.driver_factory()
            self._waiter = ElementWaiter(self._driver, timeouts=self.timeouts, poll_interval=self.poll_interval)
            logger.info("Browser session acquired")
        self._frames = FrameStack(self._driver)
        self._frames.reset()
        return self._driver

    def release(self):
        """Close the browser; a no-op when no session is active."""
        if self._driver is None:
            return
        driver = self._driver
        self._driver = None
        self._frames = None
        self._waiter = None
        driver.quit()
        logger.info("Browser session released")

    def new_session(self) -> NavigableDriver:
        """Replace the current browser by a fresh one; every application is logged out."""
        self.release()
        if self.topology is not None:
            self.topology.logout_applications()
        return self.acquire()

    def refresh(self):
        self.driver.refresh()
        self.frames.current = None

    def __enter__(self) -> "BrowserSession":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
