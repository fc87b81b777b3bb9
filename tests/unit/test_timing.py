"""Tests for clock and schedulers."""

import asyncio
from unittest.mock import MagicMock

import pytest

from idleguard.timing.clock import MonotonicClock
from idleguard.timing.scheduler import AsyncioScheduler, FrameScheduler, default_scheduler


class TestMonotonicClock:
    def test_now_is_non_decreasing(self) -> None:
        clock = MonotonicClock()
        first = clock.now()
        assert clock.now() >= first


class TestFrameScheduler:
    def test_runs_pending_callbacks(self) -> None:
        scheduler = FrameScheduler()
        callback = MagicMock()
        scheduler.schedule_next(callback)

        assert scheduler.run_pending() == 1
        callback.assert_called_once()
        assert scheduler.pending_count == 0

    def test_callbacks_scheduled_while_draining_wait_for_next_frame(self) -> None:
        scheduler = FrameScheduler()
        calls: list[int] = []

        def loop() -> None:
            calls.append(len(calls))
            scheduler.schedule_next(loop)

        scheduler.schedule_next(loop)
        scheduler.run_pending()
        assert calls == [0]
        assert scheduler.pending_count == 1

        scheduler.run_pending()
        assert calls == [0, 1]

    def test_failing_callback_does_not_stop_the_batch(self) -> None:
        scheduler = FrameScheduler()
        after = MagicMock()
        scheduler.schedule_next(MagicMock(side_effect=RuntimeError("boom")))
        scheduler.schedule_next(after)

        assert scheduler.run_pending() == 2
        after.assert_called_once()


class TestAsyncioScheduler:
    def test_call_soon_fallback(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop=loop, idle_delay_s=None)
            callback = MagicMock()
            scheduler.schedule_next(callback)
            loop.run_until_complete(asyncio.sleep(0.01))
            callback.assert_called_once()
        finally:
            loop.close()

    def test_idle_delay_defers_callback(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop=loop, idle_delay_s=0.02)
            callback = MagicMock()
            scheduler.schedule_next(callback)
            loop.run_until_complete(asyncio.sleep(0))
            callback.assert_not_called()
            loop.run_until_complete(asyncio.sleep(0.1))
            callback.assert_called_once()
        finally:
            loop.close()

    def test_failing_callback_is_contained(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop=loop, idle_delay_s=None)
            after = MagicMock()
            scheduler.schedule_next(MagicMock(side_effect=ValueError("bad")))
            scheduler.schedule_next(after)
            loop.run_until_complete(asyncio.sleep(0.01))
            after.assert_called_once()
        finally:
            loop.close()


class TestDefaultScheduler:
    def test_requires_running_loop(self) -> None:
        with pytest.raises(RuntimeError, match="FrameScheduler"):
            default_scheduler()

    def test_asyncio_scheduler_inside_running_loop(self) -> None:
        async def pick() -> object:
            return default_scheduler()

        assert isinstance(asyncio.run(pick()), AsyncioScheduler)
