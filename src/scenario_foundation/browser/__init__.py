"""
Browser synchronization layer: locators, the driver capability, the element
wait engine, frame switching and the browser session.

Example usage:
    from selenium import webdriver
    from scenario_foundation.browser import BrowserSession, Locator, SeleniumDriver

    with BrowserSession(lambda: SeleniumDriver(webdriver.Chrome())) as session:
        session.waiter.wait_while_busy()
        save = session.waiter.wait_for_element(Locator.id("save"), timeout=10)
"""

from .driver import Driver, FrameReference, NavigableDriver
from .frames import (
    BrowserFrame,
    ElementFrame,
    EmbeddedFrame,
    FrameStack,
    IndexedFrame,
    NamedFrame,
)
from .locators import (
    DEFAULT_BUSY_INDICATORS,
    Locator,
    LocatorLike,
    LocatorStrategy,
    describe_locators,
    to_locator,
)
from .page import BrowserPage
from .selenium_driver import SeleniumDriver
from .session import BrowserSession
from .waits import TRANSIENT_LOOKUP_ERRORS, ElementWaiter

__all__ = [
    # Driver capability
    'Driver',
    'FrameReference',
    'NavigableDriver',
    'SeleniumDriver',
    # Locators
    'DEFAULT_BUSY_INDICATORS',
    'Locator',
    'LocatorLike',
    'LocatorStrategy',
    'describe_locators',
    'to_locator',
    # Frames
    'BrowserFrame',
    'ElementFrame',
    'EmbeddedFrame',
    'FrameStack',
    'IndexedFrame',
    'NamedFrame',
    # Waits and session
    'BrowserPage',
    'BrowserSession',
    'ElementWaiter',
    'TRANSIENT_LOOKUP_ERRORS',
]
