"""Millisecond clock used by the idle-poll and countdown loops."""

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current time in milliseconds."""

    def now(self) -> float:
        """Return the current time in milliseconds."""
        ...


class MonotonicClock:
    """Clock backed by ``time.monotonic``; unaffected by wall-clock jumps."""

    def now(self) -> float:
        return time.monotonic() * 1000.0
