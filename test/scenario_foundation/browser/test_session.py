"""
Unit Tests for BrowserSession and BrowserPage

Tests session acquisition and release, frame reset on acquisition, the
new-session logout, and the base page helpers.
"""

import pytest

from conftest import FakeDriver, FakeElement
from scenario_foundation.browser.frames import NamedFrame
from scenario_foundation.browser.locators import Locator
from scenario_foundation.browser.page import BrowserPage
from scenario_foundation.browser.session import BrowserSession
from scenario_foundation.common.errors import BrowserError, PageBusyTimeoutError
from scenario_foundation.config import ScenarioConfig
from scenario_foundation.config.timeouts import Timeouts
from scenario_foundation.topology import Application, Topology, User


@pytest.fixture
def drivers():
    return []


@pytest.fixture
def session(drivers):
    def factory():
        driver = FakeDriver()
        drivers.append(driver)
        return driver
    return BrowserSession(factory, timeouts=Timeouts(), poll_interval=0.01)


class TestBrowserSession:

    def test_inactive_until_acquired(self, session):
        assert not session.is_active
        with pytest.raises(BrowserError):
            session.driver

    def test_acquire_resets_frames(self, session, drivers):
        session.acquire()
        assert session.is_active
        assert session.frames.current is None
        assert drivers[0].frame_calls == [('default', None)]

    def test_acquire_twice_keeps_driver(self, session, drivers):
        first = session.acquire()
        session.frames.select(NamedFrame("content"))
        assert session.acquire() is first
        assert session.frames.current is None
        assert len(drivers) == 1

    def test_release(self, session, drivers):
        session.acquire()
        session.release()
        assert not session.is_active
        assert drivers[0].quit_count == 1
        session.release()
        assert drivers[0].quit_count == 1

    def test_new_session_logs_out_topology(self, drivers):
        topology = Topology([Application("https://h:1/app")])
        topology.login("https://h:1/app", User("alice"))
        session = BrowserSession(lambda: drivers.append(FakeDriver()) or drivers[-1], topology=topology)
        session.acquire()

        session.new_session()

        assert len(drivers) == 2
        assert drivers[0].quit_count == 1
        assert topology.get_logged_user("https://h:1/app") is None

    def test_from_config(self):
        config = ScenarioConfig(performance="SLOW", pollInterval=0.25, timeouts={"timeoutShort": 4})
        session = BrowserSession.from_config(config, FakeDriver)
        session.acquire()
        assert session.waiter.poll_interval == 0.25
        assert session.waiter.timeouts.short == 4
        assert session.waiter.timeouts.default == 120

    def test_context_manager(self, session, drivers):
        with session as active:
            assert active.is_active
        assert drivers[0].quit_count == 1

    def test_waiter_uses_session_driver(self, session, drivers):
        session.acquire()
        assert session.waiter.driver is drivers[0]
        assert session.waiter.poll_interval == 0.01

    def test_refresh_drops_frame(self, session, drivers):
        session.acquire()
        session.frames.select(NamedFrame("content"))
        session.refresh()
        assert drivers[0].refresh_count == 1
        assert session.frames.current is None


class TestBrowserPage:

    def test_current_location(self, session):
        session.acquire()
        assert BrowserPage(session).current_location() == "https://host1:1/app/page"

    def test_corrective_action_refreshes(self, session, drivers):
        session.acquire()
        assert BrowserPage(session).perform_corrective_action() is None
        assert drivers[0].refresh_count == 1

    def test_wait_for_element_proxy(self, session, drivers):
        session.acquire()
        button = FakeElement("save")
        drivers[0].set_elements(Locator.id("save"), button)
        assert BrowserPage(session).wait_for_element(Locator.id("save"), timeout=0) is button

    def test_wait_while_busy_names_the_page(self, session, drivers):
        class DashboardPage(BrowserPage):
            pass

        session.acquire()
        spinner = Locator.css(".spinner")
        drivers[0].set_elements(spinner, FakeElement("spinner"))
        page = DashboardPage(session, busy_indicators=[spinner])
        with pytest.raises(PageBusyTimeoutError) as exc_info:
            page.wait_while_busy(timeout=0.05)
        assert exc_info.value.scope == "DashboardPage"
