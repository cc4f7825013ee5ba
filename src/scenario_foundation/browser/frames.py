"""
Frame Switch Stack

Pages embedding frames require the driver to be switched into the right frame
before any lookup. A frame knows how to reach itself from the top-level
document; FrameStack tracks which frame a session currently points to.

Components:
- BrowserFrame: Base class, switching always starts from the top-level document
- IndexedFrame / NamedFrame / ElementFrame: Frames identified by index, name or element
- EmbeddedFrame: An element frame nested inside another element frame
- FrameStack: Current frame of a session, with scoped switching
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from attr import attrs, attrib

from ..common.errors import InvalidArgumentError
from .driver import Driver

logger = logging.getLogger(__name__)


@attrs(frozen=True)
class BrowserFrame:
    """Base frame; subclasses say which reference the driver switches to."""

    @property
    def reference(self) -> Any:
        raise NotImplementedError

    def switch_to(self, driver: Driver):
        """Switch the driver from the top-level document into this frame."""
        driver.switch_to_default_content()
        driver.switch_to_frame(self.reference)

    @property
    def parent(self) -> Optional["BrowserFrame"]:
        return None


@attrs(frozen=True)
class IndexedFrame(BrowserFrame):
    index: int = attrib()

    @property
    def reference(self) -> int:
        return self.index


@attrs(frozen=True)
class NamedFrame(BrowserFrame):
    name: str = attrib()

    @property
    def reference(self) -> str:
        return self.name


@attrs(frozen=True)
class ElementFrame(BrowserFrame):
    # Equal when the element handles are equal
    element: Any = attrib()

    @property
    def reference(self) -> Any:
        return self.element


@attrs(frozen=True)
class EmbeddedFrame(ElementFrame):
    """
    A frame element living inside another frame.

    Switching to it switches to the parent frame first (recursively up to the
    top-level document), then into the element.

    Raises:
        InvalidArgumentError: If the parent is missing or not an element frame
    """
    parent_frame: Optional[ElementFrame] = attrib(default=None, kw_only=True)

    def __attrs_post_init__(self):
        if self.parent_frame is None:
            raise InvalidArgumentError("An embedded frame requires a parent frame", argument="parent_frame")
        if not isinstance(self.parent_frame, ElementFrame):
            raise InvalidArgumentError(
                f"Parent of an embedded frame must be an element frame, got {type(self.parent_frame).__name__}",
                argument="parent_frame",
            )

    @property
    def parent(self) -> ElementFrame:
        return self.parent_frame

    def switch_to(self, driver: Driver):
        self.parent_frame.switch_to(driver)
        driver.switch_to_frame(self.element)


@attrs(slots=False)
class FrameStack:
    """
    Tracks the frame a browser session currently points to.

    Attributes:
        driver: The driver whose frame is tracked
        current: The selected frame, None for the top-level document

    Example:
        >>> stack = FrameStack(driver)
        >>> with stack.selected(NamedFrame("content")):
        ...     waiter.wait_for_element(Locator.id("save"))
        >>> stack.current is None
        True
    """
    driver: Driver = attrib()
    current: Optional[BrowserFrame] = attrib(default=None, init=False)

    def select(self, frame: Optional[BrowserFrame]) -> Optional[BrowserFrame]:
        """
        Switch into the given frame (None = top-level document).

        Returns:
            The previously selected frame
        """
        previous = self.current
        if frame is None:
            self.driver.switch_to_default_content()
        else:
            frame.switch_to(self.driver)
        self.current = frame
        logger.debug(f"[FrameStack.select] switched from {previous} to {frame}")
        return previous

    def reset(self):
        """Go back to the top-level document."""
        self.select(None)

    def select_parent(self) -> Optional[BrowserFrame]:
        """Switch to the frame containing the current one; returns the new current frame."""
        parent = self.current.parent if self.current is not None else None
        self.select(parent)
        return parent

    @contextmanager
    def selected(self, frame: Optional[BrowserFrame]) -> Iterator[Optional[BrowserFrame]]:
        """Switch into a frame for the duration of the block, then restore the previous one."""
        previous = self.select(frame)
        try:
            yield frame
        finally:
            self.select(previous)
