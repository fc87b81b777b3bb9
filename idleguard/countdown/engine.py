"""Countdown engine driving the warning-to-action timer."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from idleguard.logger import get_logger
from idleguard.timing.clock import Clock
from idleguard.timing.scheduler import Scheduler

logger = get_logger()

TICK_MS = 1000.0


class CountdownPhase(Enum):
    """Countdown state machine phases."""

    IDLE = auto()  # Not started, or re-seeded after a run
    RUNNING = auto()  # Ticking once per second
    CANCELLED = auto()  # Stopped by the user before reaching zero
    EXPIRED = auto()  # Reached zero


@dataclass
class CountdownState:
    """Current phase and remaining whole seconds."""

    phase: CountdownPhase = CountdownPhase.IDLE
    remaining_seconds: int = 0


def seconds_for(duration_ms: float) -> int:
    """Truncate a duration to whole seconds, with a floor of one second."""
    try:
        seconds = math.floor(float(duration_ms) / 1000)
    except (TypeError, ValueError, OverflowError):
        return 1
    return seconds if seconds > 0 else 1


class CountdownEngine:
    """Counts down whole seconds and reports expiry.

    Each one-second wait is measured as a clock delta, yielding through the
    scheduler until it has elapsed, so scheduler jitter never speeds up or
    slows down the count. Remaining time is truncated once at start and only
    ever decremented after that.
    """

    def __init__(
        self,
        clock: Clock,
        scheduler: Scheduler,
        on_expired: Callable[[], None],
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            clock: Millisecond clock.
            scheduler: Yield primitive for the tick loop.
            on_expired: Called once when a run reaches zero.
            on_tick: Called with the remaining seconds after each decrement.
        """
        self._clock = clock
        self._scheduler = scheduler
        self._on_expired = on_expired
        self._on_tick = on_tick
        self.state = CountdownState()
        # Identifies the current run; tick loops from earlier runs stand down
        self._run_id = 0

    @property
    def phase(self) -> CountdownPhase:
        return self.state.phase

    @property
    def remaining_seconds(self) -> int:
        return self.state.remaining_seconds

    @property
    def is_running(self) -> bool:
        return self.state.phase == CountdownPhase.RUNNING

    def reset(self, duration_ms: float) -> None:
        """Re-seed the displayed value while no run is active."""
        if self.is_running:
            return
        self.state.phase = CountdownPhase.IDLE
        self.state.remaining_seconds = seconds_for(duration_ms)

    def start(self, duration_ms: float) -> bool:
        """Begin counting down from ``duration_ms``.

        Args:
            duration_ms: Warning duration in milliseconds.

        Returns:
            True if a new run started, False if one was already running.
        """
        if self.is_running:
            return False

        self._run_id += 1
        self.state.remaining_seconds = seconds_for(duration_ms)
        self.state.phase = CountdownPhase.RUNNING
        logger.debug(f"Countdown started at {self.state.remaining_seconds}s")
        self._wait_one_second(self._run_id, self._clock.now())
        return True

    def cancel(self) -> bool:
        """Stop a running countdown.

        Returns:
            True if a run was cancelled.
        """
        if not self.is_running:
            return False
        self.state.phase = CountdownPhase.CANCELLED
        logger.debug(f"Countdown cancelled with {self.state.remaining_seconds}s left")
        return True

    def manual_decrement(self) -> None:
        """Take one second off immediately; expire when at the last second."""
        if not self.is_running:
            return
        if self.state.remaining_seconds > 1:
            self.state.remaining_seconds -= 1
            self._notify_tick()
        else:
            self.state.remaining_seconds = 0
            self._expire()

    def _live(self, run_id: int) -> bool:
        return run_id == self._run_id and self.is_running

    def _wait_one_second(self, run_id: int, started_at: float) -> None:
        if not self._live(run_id):
            return
        if self._clock.now() - started_at >= TICK_MS:
            self._tick(run_id)
        else:
            self._scheduler.schedule_next(lambda: self._wait_one_second(run_id, started_at))

    def _tick(self, run_id: int) -> None:
        self.state.remaining_seconds = max(0, self.state.remaining_seconds - 1)
        self._notify_tick()

        # A tick listener may have cancelled the run
        if not self._live(run_id):
            return
        if self.state.remaining_seconds == 0:
            self._expire()
        else:
            self._wait_one_second(run_id, self._clock.now())

    def _notify_tick(self) -> None:
        if self._on_tick is None:
            return
        try:
            self._on_tick(self.state.remaining_seconds)
        except Exception:
            logger.exception("Countdown tick listener failed")

    def _expire(self) -> None:
        self.state.phase = CountdownPhase.EXPIRED
        logger.info("Countdown expired")
        self._on_expired()
