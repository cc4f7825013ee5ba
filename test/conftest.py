"""
Shared Test Fixtures and Doubles for Scenario Foundation Tests

Provides a scriptable driver double, a fake clock for deterministic polling
waits, and pytest fixtures wiring them together.

Usage:
    # Fixtures are automatically available via pytest
    def test_something(fake_driver, waiter):
        ...

    # Doubles can be imported directly (e.g. from hypothesis tests)
    from conftest import FakeClock, FakeDriver, FakeElement
"""
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Setup import paths
_current_file = Path(__file__).resolve()
_test_dir = _current_file.parent
while _test_dir.name != 'test' and _test_dir.parent != _test_dir:
    _test_dir = _test_dir.parent
_project_root = _test_dir.parent
_src_dir = _project_root / "src"
if _src_dir.exists() and str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from scenario_foundation.browser.locators import Locator
from scenario_foundation.browser.waits import ElementWaiter
from scenario_foundation.config.timeouts import Timeouts


# =============================================================================
# Doubles
# =============================================================================

class FakeElement:
    """Element handle double with a settable displayed state."""

    def __init__(self, name: str, displayed: bool = True):
        self.name = name
        self.displayed = displayed

    def __repr__(self):
        return f"FakeElement({self.name!r}, displayed={self.displayed})"


class FakeClock:
    """Monotonic clock double; sleeping advances the time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeDriver:
    """
    Driver double.

    Each locator maps to the elements it currently matches. A per-locator
    script (list of poll results) takes precedence while it lasts, and
    scripted errors are raised once each, before anything else.
    """

    def __init__(self, current_url: str = "https://host1:1/app/page"):
        self.current_url = current_url
        self.elements: Dict[Locator, List[Any]] = {}
        self.scripts: Dict[Locator, List[List[Any]]] = {}
        self.errors: Dict[Locator, List[Exception]] = {}
        self.find_calls: List[tuple] = []
        self.frame_calls: List[tuple] = []
        self.refresh_count = 0
        self.quit_count = 0

    # region scripting
    def set_elements(self, locator: Locator, *elements: Any):
        self.elements[locator] = list(elements)

    def script(self, locator: Locator, *polls: List[Any]):
        self.scripts[locator] = [list(poll) for poll in polls]

    def fail_next(self, locator: Locator, *errors: Exception):
        self.errors.setdefault(locator, []).extend(errors)
    # endregion

    def find_elements(self, scope: Optional[Any], locator: Locator) -> List[Any]:
        self.find_calls.append((scope, locator))
        if self.errors.get(locator):
            raise self.errors[locator].pop(0)
        if self.scripts.get(locator):
            return list(self.scripts[locator].pop(0))
        return list(self.elements.get(locator, []))

    def is_displayed(self, element: Any) -> bool:
        return element.displayed

    def switch_to_frame(self, reference: Any):
        self.frame_calls.append(('frame', reference))

    def switch_to_default_content(self):
        self.frame_calls.append(('default', None))

    def refresh(self):
        self.refresh_count += 1

    def quit(self):
        self.quit_count += 1


# =============================================================================
# Pytest Fixtures
# =============================================================================

@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def waiter(fake_driver, fake_clock):
    """An ElementWaiter over the driver double, polling every 0.5s of fake time."""
    return ElementWaiter(
        fake_driver,
        timeouts=Timeouts(),
        poll_interval=0.5,
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )
