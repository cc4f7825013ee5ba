"""
Driver Capability

The scenario core never talks to a browser directly. It relies on the small
capability below, which any automation backend can satisfy. SeleniumDriver
(in ``selenium_driver``) is the WebDriver-backed implementation.

The element handles a driver returns are opaque to the core; they are only
passed back to the same driver (``is_displayed``, frame switching, scoping a
lookup under a parent element).
"""

from typing import Any, List, Optional, Protocol, Union, runtime_checkable

from .locators import Locator

# Frame reference accepted by switch_to_frame: index, name or element handle
FrameReference = Union[int, str, Any]


@runtime_checkable
class Driver(Protocol):
    """
    Protocol defining what the wait engine and frame stack need from a browser.

    Required:
        - find_elements: All elements matching a locator under a scope
          (None = current document or frame). Returns an empty list when
          nothing matches; may raise transient driver errors.
        - is_displayed: Whether an element is visually displayed
        - switch_to_frame: Descend into a frame of the current document
        - switch_to_default_content: Go back to the top-level document
    """

    def find_elements(self, scope: Optional[Any], locator: Locator) -> List[Any]:
        ...

    def is_displayed(self, element: Any) -> bool:
        ...

    def switch_to_frame(self, reference: FrameReference) -> None:
        ...

    def switch_to_default_content(self) -> None:
        ...


@runtime_checkable
class NavigableDriver(Driver, Protocol):
    """A driver that also exposes the current page and session control."""

    @property
    def current_url(self) -> str:
        ...

    def refresh(self) -> None:
        ...

    def quit(self) -> None:
        ...
