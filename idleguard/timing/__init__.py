"""Clock and cooperative scheduling primitives."""

from idleguard.timing.clock import Clock, MonotonicClock
from idleguard.timing.scheduler import (
    AsyncioScheduler,
    FrameScheduler,
    Scheduler,
    default_scheduler,
)

__all__ = [
    "Clock",
    "MonotonicClock",
    "Scheduler",
    "AsyncioScheduler",
    "FrameScheduler",
    "default_scheduler",
]
