"""
Selenium implementation of the driver capability.

Example usage:
    from selenium import webdriver
    from scenario_foundation.browser import BrowserSession, SeleniumDriver

    session = BrowserSession(driver_factory=lambda: SeleniumDriver(webdriver.Chrome()))
"""

import logging
from typing import Any, List, Optional

from attr import attrs, attrib
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from ..common.constants import is_browser_crash
from ..common.errors import BrowserError
from .driver import FrameReference
from .locators import Locator

logger = logging.getLogger(__name__)


@attrs(slots=False)
class SeleniumDriver:
    """
    Adapts a Selenium WebDriver to the Driver protocol.

    Lookups and frame switches go through the WebDriver untouched, so
    Selenium's own exceptions (stale element, no such frame...) reach the
    wait engine, which treats them as transient. Errors telling the
    browser is gone are raised as BrowserError.

    Attributes:
        webdriver: The wrapped Selenium WebDriver
    """
    webdriver: WebDriver = attrib()

    def find_elements(self, scope: Optional[Any], locator: Locator) -> List[Any]:
        root = self.webdriver if scope is None else scope
        try:
            return root.find_elements(locator.strategy.value, locator.value)
        except WebDriverException as e:
            if is_browser_crash(e):
                raise BrowserError(f"Browser session lost while looking for '{locator}': {e.msg}") from e
            raise

    def is_displayed(self, element: Any) -> bool:
        return element.is_displayed()

    def switch_to_frame(self, reference: FrameReference) -> None:
        self.webdriver.switch_to.frame(reference)

    def switch_to_default_content(self) -> None:
        self.webdriver.switch_to.default_content()

    @property
    def current_url(self) -> str:
        return self.webdriver.current_url

    def refresh(self) -> None:
        self.webdriver.refresh()

    def quit(self) -> None:
        try:
            self.webdriver.quit()
        except WebDriverException as e:
            logger.warning(f"[SeleniumDriver.quit] browser did not close cleanly: {e.msg}")
