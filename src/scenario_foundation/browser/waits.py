"""
Element Wait Engine

The UI under test renders asynchronously: elements appear, disappear and get
re-rendered while the test looks for them. Every lookup of the scenario core
therefore goes through a polling wait bounded by a deadline.

Polling semantics shared by every wait:
- The deadline is ``now + timeout``, computed once and re-checked after each poll.
- The first poll always happens, so a zero timeout means "check once".
- Transient driver errors raised during a poll (stale handles, frame being
  re-rendered, Selenium WebDriverException) are logged and polling continues.
  A lost browser session is not transient and propagates.
- On timeout, ``fail=True`` raises a timeout-class error naming what was
  waited for and how long; ``fail=False`` returns an empty result.
"""

import logging
import time
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from attr import attrs, attrib
from selenium.common.exceptions import WebDriverException

from ..common.constants import DEFAULT_POLL_INTERVAL, is_browser_crash
from ..common.errors import (
    BrowserError,
    InvalidArgumentError,
    MultipleVisibleElementsError,
    PageBusyTimeoutError,
    WaitElementTimeoutError,
)
from ..config.timeouts import Timeouts
from .driver import Driver
from .locators import DEFAULT_BUSY_INDICATORS, Locator, LocatorLike, describe_locators, to_locator

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Errors a lookup may raise while the page is still changing
TRANSIENT_LOOKUP_ERRORS = (BrowserError, WebDriverException)


@attrs(slots=False)
class ElementWaiter:
    """
    Polling element waits over a driver.

    Attributes:
        driver: The driver performing lookups
        timeouts: Timeout policy; ``timeouts.default`` applies when a wait gives no timeout
        poll_interval: Seconds slept between two polls
        clock: Monotonic clock returning seconds
        sleep: Sleep function, called with the seconds to wait

    Example:
        >>> waiter = ElementWaiter(driver, timeouts=config.timeouts())
        >>> button = waiter.wait_for_element(Locator.id("save"), timeout=10)
        >>> waiter.wait_for_element(Locator.id("banner"), timeout=0, fail=False) is None
        True
    """
    driver: Driver = attrib()
    timeouts: Timeouts = attrib(factory=Timeouts)
    poll_interval: float = attrib(default=DEFAULT_POLL_INTERVAL)
    clock: Callable[[], float] = attrib(default=time.monotonic)
    sleep: Callable[[float], None] = attrib(default=time.sleep)

    # region polling primitives
    def _resolve_timeout(self, timeout: Optional[float]) -> float:
        return self.timeouts.default if timeout is None else timeout

    def _poll(self, probe: Callable[[], Optional[T]], timeout: float) -> Tuple[Optional[T], float]:
        """
        Run the probe until it returns a truthy value or the deadline passes.

        Returns:
            The last probe result (None or falsy on timeout) and the elapsed seconds
        """
        start = self.clock()
        deadline = start + timeout
        while True:
            result = probe()
            now = self.clock()
            if result:
                return result, now - start
            if now >= deadline:
                return result, now - start
            self.sleep(min(self.poll_interval, deadline - now))

    def _matches(self, scope: Optional[Any], locator: Locator, displayed: bool) -> List[Any]:
        """
        Elements matching the locator in one poll.

        With ``displayed`` only visually displayed elements qualify; otherwise
        every element present in the document qualifies, displayed ones first.
        """
        try:
            elements = self.driver.find_elements(scope, locator)
            visible = []
            hidden = []
            for element in elements:
                if self.driver.is_displayed(element):
                    visible.append(element)
                else:
                    hidden.append(element)
        except TRANSIENT_LOOKUP_ERRORS as e:
            if is_browser_crash(e):
                raise
            logger.debug(f"[ElementWaiter._matches] transient error looking for '{locator}': {e}")
            return []
        if displayed:
            return visible
        return visible + hidden
    # endregion

    # region element waits
    def wait_for_elements(
        self,
        locator: LocatorLike,
        scope: Optional[Any] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
        displayed: bool = True,
    ) -> List[Any]:
        """
        Wait until at least one element matches the locator.

        Args:
            locator: What to look for
            scope: Parent element to search under, None for the current document
            timeout: Seconds to wait, the default timeout when None
            fail: Raise on timeout instead of returning an empty list
            displayed: Only consider visually displayed elements

        Returns:
            The matching elements, empty on timeout when fail is False

        Raises:
            WaitElementTimeoutError: If nothing matched before the timeout and fail is True
        """
        locator = to_locator(locator)
        timeout = self._resolve_timeout(timeout)
        elements, elapsed = self._poll(lambda: self._matches(scope, locator, displayed), timeout)
        if elements:
            return elements
        if fail:
            raise WaitElementTimeoutError.for_locator(locator, timeout, elapsed)
        logger.debug(f"[ElementWaiter.wait_for_elements] '{locator}' not found after {elapsed:.1f}s")
        return []

    def wait_for_element(
        self,
        locator: LocatorLike,
        scope: Optional[Any] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
        displayed: bool = True,
        single: bool = True,
    ) -> Optional[Any]:
        """
        Wait for the element matching the locator.

        In single mode exactly one displayed element is expected: several
        displayed matches mean the locator is ambiguous and raise an error
        rather than picking one. With ``displayed=False`` or ``single=False``
        the first match is returned.

        Returns:
            The element, None on timeout when fail is False

        Raises:
            WaitElementTimeoutError: If nothing matched before the timeout and fail is True
            MultipleVisibleElementsError: If several displayed elements matched in single mode
        """
        locator = to_locator(locator)
        elements = self.wait_for_elements(locator, scope=scope, timeout=timeout, fail=fail, displayed=displayed)
        if not elements:
            return None
        if len(elements) > 1 and single:
            if displayed:
                raise MultipleVisibleElementsError(locator, len(elements))
            logger.warning(f"Several elements match '{locator}' ({len(elements)}), using the first one")
        return elements[0]

    def wait_for_multiple_elements(
        self,
        locators: Sequence[LocatorLike],
        scope: Optional[Any] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
        displayed_flags: Optional[Sequence[bool]] = None,
    ) -> Optional[List[Optional[Any]]]:
        """
        Wait until at least one of several locators matches.

        Each poll looks up every locator; as soon as one of them matches, the
        result of that poll is returned: a list aligned with ``locators``
        holding the first qualifying element of each locator, or None for the
        locators that did not match.

        Args:
            locators: What to look for
            scope: Parent element to search under, None for the current document
            timeout: Seconds to wait, the default timeout when None
            fail: Raise on timeout instead of returning None
            displayed_flags: Per-locator displayed requirement, all True when None

        Raises:
            InvalidArgumentError: If no locator is given or the flags do not match the locators
            WaitElementTimeoutError: If nothing matched before the timeout and fail is True
        """
        if not locators:
            raise InvalidArgumentError("At least one locator is required", argument="locators")
        locators = [to_locator(locator) for locator in locators]
        if displayed_flags is None:
            displayed_flags = [True] * len(locators)
        if len(displayed_flags) != len(locators):
            raise InvalidArgumentError(
                f"Got {len(displayed_flags)} displayed flags for {len(locators)} locators",
                argument="displayed_flags",
            )
        timeout = self._resolve_timeout(timeout)

        def probe() -> Optional[List[Optional[Any]]]:
            slots = []
            for locator, displayed in zip(locators, displayed_flags):
                matches = self._matches(scope, locator, displayed)
                slots.append(matches[0] if matches else None)
            if any(slot is not None for slot in slots):
                return slots
            return None

        slots, elapsed = self._poll(probe, timeout)
        if slots is not None:
            return slots
        if fail:
            raise WaitElementTimeoutError(
                f"Timeout while waiting for multiple elements: {describe_locators(locators)}. "
                f"Took longer than '{timeout}' seconds.",
                locator=list(locators),
                timeout=timeout,
                elapsed=elapsed,
            )
        return None

    def wait_for_any(
        self,
        locators: Sequence[LocatorLike],
        scope: Optional[Any] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
        displayed: bool = True,
    ) -> Optional[Any]:
        """Wait for whichever of the locators matches first and return its element."""
        slots = self.wait_for_multiple_elements(
            locators, scope=scope, timeout=timeout, fail=fail, displayed_flags=[displayed] * len(locators)
        )
        if slots is None:
            return None
        return next(slot for slot in slots if slot is not None)

    def wait_while_displayed(
        self,
        locator: LocatorLike,
        scope: Optional[Any] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
    ) -> bool:
        """
        Wait until no displayed element matches the locator.

        Returns:
            True once nothing is displayed, False on timeout when fail is False

        Raises:
            WaitElementTimeoutError: If still displayed at the timeout and fail is True
        """
        locator = to_locator(locator)
        timeout = self._resolve_timeout(timeout)
        gone, elapsed = self._poll(lambda: not self._matches(scope, locator, True), timeout)
        if gone:
            return True
        if fail:
            raise WaitElementTimeoutError(
                f"Element '{locator}' was still displayed after '{timeout}' seconds.",
                locator=locator,
                timeout=timeout,
                elapsed=elapsed,
            )
        return False
    # endregion

    # region busy indicator
    def is_busy(self, scope: Optional[Any] = None, locators: Optional[Sequence[Locator]] = None) -> bool:
        """Whether a busy or skeleton indicator is currently displayed."""
        locators = DEFAULT_BUSY_INDICATORS if locators is None else [to_locator(locator) for locator in locators]
        return any(self._matches(scope, locator, True) for locator in locators)

    def wait_while_busy(
        self,
        scope: Optional[Any] = None,
        locators: Optional[Sequence[Locator]] = None,
        timeout: Optional[float] = None,
        fail: bool = True,
        label: Optional[str] = None,
    ) -> bool:
        """
        Wait until the page (or the dialog given as scope) is no longer busy.

        Args:
            scope: Dialog element to watch, None for the whole page
            locators: Busy indicators, DEFAULT_BUSY_INDICATORS when None
            timeout: Seconds to wait, the open-page timeout when None
            fail: Raise on timeout instead of returning False
            label: Name of the watched page or dialog used in the error message

        Returns:
            True once idle, False on timeout when fail is False

        Raises:
            PageBusyTimeoutError: If still busy at the timeout and fail is True
        """
        timeout = self.timeouts.open_page if timeout is None else timeout
        idle, elapsed = self._poll(lambda: not self.is_busy(scope, locators), timeout)
        if idle:
            if elapsed:
                logger.debug(f"[ElementWaiter.wait_while_busy] idle after {elapsed:.1f}s")
            return True
        if fail:
            label = label or ("Page" if scope is None else "Dialog")
            raise PageBusyTimeoutError(label, timeout, elapsed)
        return False
    # endregion
