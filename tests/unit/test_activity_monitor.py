"""Tests for the activity monitor."""

from unittest.mock import MagicMock

import pytest

from idleguard.activity.monitor import ACTIVITY_EVENTS, ActivityMonitor
from idleguard.host.events import VisibilityState
from idleguard.host.page import PageContext


@pytest.fixture
def on_idle() -> MagicMock:
    return MagicMock()


@pytest.fixture
def monitor(page: PageContext, clock, scheduler, on_idle: MagicMock) -> ActivityMonitor:
    m = ActivityMonitor(
        window=page.window,
        document=page.document,
        clock=clock,
        scheduler=scheduler,
        on_idle=on_idle,
        warning_shown=lambda: on_idle.call_count > 0,
    )
    yield m  # type: ignore[misc]
    m.stop()


class TestActivityMonitor:
    def test_initial_state(self, monitor: ActivityMonitor) -> None:
        assert not monitor.monitoring
        assert not monitor.loop_alive
        assert monitor.state.window_focused

    def test_start_registers_listeners_and_loop(
        self, monitor: ActivityMonitor, page: PageContext, scheduler
    ) -> None:
        monitor.start(5000)

        assert monitor.monitoring
        assert monitor.loop_alive
        for event_type in ACTIVITY_EVENTS:
            assert page.window.listener_count(event_type) == 1
        assert page.window.listener_count("focus") == 1
        assert page.window.listener_count("blur") == 1
        assert page.document.listener_count("visibilitychange") == 1
        assert scheduler.pending_count == 1

    def test_idle_signalled_after_timeout(
        self, monitor: ActivityMonitor, on_idle: MagicMock, advance
    ) -> None:
        monitor.start(5000)

        advance(4900)
        on_idle.assert_not_called()

        advance(100)
        on_idle.assert_called_once()

    def test_idle_signalled_once_while_warning_shown(
        self, monitor: ActivityMonitor, on_idle: MagicMock, advance
    ) -> None:
        monitor.start(1000)
        advance(5000)
        on_idle.assert_called_once()

    @pytest.mark.parametrize("event_type", ACTIVITY_EVENTS)
    def test_activity_resets_idle_clock(
        self,
        monitor: ActivityMonitor,
        page: PageContext,
        on_idle: MagicMock,
        advance,
        event_type: str,
    ) -> None:
        monitor.start(5000)
        advance(4000)
        page.window.dispatch(event_type)
        advance(4000)
        on_idle.assert_not_called()
        advance(1000)
        on_idle.assert_called_once()

    def test_blur_and_focus(
        self, monitor: ActivityMonitor, page: PageContext, on_idle: MagicMock, advance
    ) -> None:
        monitor.start(5000)
        page.window.dispatch("blur")
        assert not monitor.state.window_focused

        advance(4500)
        page.window.dispatch("focus")
        assert monitor.state.window_focused
        advance(4500)
        on_idle.assert_not_called()

    def test_visibility_regained_resets_idle_clock(
        self, monitor: ActivityMonitor, page: PageContext, on_idle: MagicMock, advance
    ) -> None:
        monitor.start(5000)
        page.document.set_visibility(VisibilityState.HIDDEN)
        assert not monitor.state.window_focused

        advance(4500)
        page.document.set_visibility(VisibilityState.VISIBLE)
        assert monitor.state.window_focused
        advance(4500)
        on_idle.assert_not_called()

    def test_hidden_tab_still_times_out(
        self, monitor: ActivityMonitor, page: PageContext, on_idle: MagicMock, advance
    ) -> None:
        monitor.start(5000)
        page.document.set_visibility(VisibilityState.HIDDEN)
        advance(5000)
        on_idle.assert_called_once()

    def test_stop_removes_listeners_and_ends_loop(
        self, monitor: ActivityMonitor, page: PageContext, on_idle: MagicMock, advance, scheduler
    ) -> None:
        monitor.start(1000)
        monitor.stop()
        monitor.stop()

        assert not monitor.monitoring
        assert page.window.listener_count() == 0
        assert page.document.listener_count() == 0

        advance(5000)
        on_idle.assert_not_called()
        assert not monitor.loop_alive
        assert scheduler.pending_count == 0

    def test_restart_before_loop_wakes_keeps_single_loop(
        self, monitor: ActivityMonitor, scheduler, advance
    ) -> None:
        monitor.start(5000)
        monitor.stop()
        monitor.start(5000)

        assert scheduler.pending_count == 1
        advance(1000)
        assert scheduler.pending_count == 1

    def test_start_twice_keeps_single_loop_and_listeners(
        self, monitor: ActivityMonitor, page: PageContext, scheduler
    ) -> None:
        monitor.start(5000)
        monitor.start(5000)

        assert scheduler.pending_count == 1
        assert page.window.listener_count("mousemove") == 1

    def test_check_errors_do_not_stop_loop(
        self, page: PageContext, clock, scheduler, advance
    ) -> None:
        on_idle = MagicMock(side_effect=RuntimeError("boom"))
        monitor = ActivityMonitor(
            window=page.window,
            document=page.document,
            clock=clock,
            scheduler=scheduler,
            on_idle=on_idle,
            warning_shown=lambda: False,
        )
        monitor.start(1000)
        advance(1500)

        assert on_idle.call_count > 1
        assert monitor.loop_alive
        monitor.stop()

    def test_touch_resets_idle_time(self, monitor: ActivityMonitor, clock) -> None:
        monitor.start(5000)
        clock.advance(3000)
        assert monitor.idle_for_ms() == 3000
        monitor.touch()
        assert monitor.idle_for_ms() == 0
