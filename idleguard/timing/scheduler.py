"""Cooperative "run at the next idle opportunity" schedulers.

Both loops in the guard (idle polling and the countdown's one-second wait)
yield through a ``Scheduler`` instead of sleeping. Schedulers make no promise
about the exact delay, so callers always re-check elapsed clock time after
they wake.
"""

import asyncio
from collections import deque
from collections.abc import Callable
from typing import Protocol

from idleguard.logger import get_logger

logger = get_logger()

# Upper bound on how long a low-priority callback may be deferred (seconds)
DEFAULT_IDLE_DELAY_S = 0.05


class Scheduler(Protocol):
    """Runs a callback at the next favourable opportunity."""

    def schedule_next(self, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` to run once, later.

        Args:
            callback: Zero-argument callable.
        """
        ...


def _run_guarded(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Scheduled callback failed")


class AsyncioScheduler:
    """Scheduler on top of an asyncio event loop.

    The preferred path defers each callback by a small bounded delay via
    ``loop.call_later`` so more urgent work on the loop runs first. With no
    idle delay it falls back to ``loop.call_soon``.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        idle_delay_s: float | None = DEFAULT_IDLE_DELAY_S,
    ) -> None:
        """Initialize the scheduler.

        Args:
            loop: Event loop to schedule on. Defaults to the running loop.
            idle_delay_s: Deferral bound; ``None`` or 0 uses ``call_soon``.
        """
        self._loop = loop or asyncio.get_running_loop()
        self._idle_delay_s = idle_delay_s

    def schedule_next(self, callback: Callable[[], None]) -> None:
        if self._idle_delay_s:
            self._loop.call_later(self._idle_delay_s, _run_guarded, callback)
        else:
            self._loop.call_soon(_run_guarded, callback)


class FrameScheduler:
    """Queue drained once per host frame.

    Hosts with their own main loop (the pygame window) call ``run_pending``
    every frame. Callbacks scheduled while draining are deferred to the next
    frame, so a self-rescheduling loop advances one step per frame.
    """

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def schedule_next(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        """Run the callbacks queued before this call.

        Returns:
            Number of callbacks run.
        """
        batch = len(self._pending)
        for _ in range(batch):
            _run_guarded(self._pending.popleft())
        return batch


def default_scheduler() -> Scheduler:
    """Scheduler on the running asyncio loop.

    Hosts without an asyncio loop must pass a scheduler they drain
    themselves, such as ``FrameScheduler``; an undrained queue would leave
    both loops stalled after their first step.

    Raises:
        RuntimeError: If no asyncio loop is running.
    """
    try:
        return AsyncioScheduler()
    except RuntimeError as e:
        raise RuntimeError(
            "No running asyncio loop; pass a scheduler the host drains, e.g. FrameScheduler"
        ) from e
