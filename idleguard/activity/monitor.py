"""Activity monitor: listens for user input and polls for inactivity."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from idleguard.host.events import Document, EventTarget, VisibilityState
from idleguard.logger import get_logger
from idleguard.timing.clock import Clock
from idleguard.timing.scheduler import Scheduler

logger = get_logger()

# Window events that count as user activity
ACTIVITY_EVENTS = (
    "mousemove",
    "mousedown",
    "keypress",
    "scroll",
    "touchstart",
    "wheel",
    "click",
    "dragstart",
    "mouseenter",
)


@dataclass
class ActivityState:
    """Mutable activity bookkeeping."""

    last_activity_at: float = 0.0
    monitoring: bool = False
    window_focused: bool = True


class ActivityMonitor:
    """Tracks the time of last activity and signals when the page goes idle.

    One idle-poll loop runs at a time. The loop yields through the scheduler
    between checks and stops rescheduling itself as soon as ``monitoring`` is
    cleared; there is no other cancellation path.
    """

    def __init__(
        self,
        window: EventTarget,
        document: Document,
        clock: Clock,
        scheduler: Scheduler,
        on_idle: Callable[[], None],
        warning_shown: Callable[[], bool],
    ) -> None:
        """Initialize the monitor.

        Args:
            window: Target receiving activity, focus and blur events.
            document: Target receiving visibilitychange.
            clock: Millisecond clock.
            scheduler: Yield primitive for the poll loop.
            on_idle: Called when the inactivity threshold is crossed.
            warning_shown: Returns True while the warning is up; idle is not
                signalled again meanwhile.
        """
        self._window = window
        self._document = document
        self._clock = clock
        self._scheduler = scheduler
        self._on_idle = on_idle
        self._warning_shown = warning_shown

        self.state = ActivityState(last_activity_at=clock.now())
        self._inactivity_timeout_ms = 0
        self._loop_alive = False
        self._subscriptions: list[tuple[EventTarget, str, Callable[[Any], None]]] = []

    @property
    def monitoring(self) -> bool:
        return self.state.monitoring

    @property
    def loop_alive(self) -> bool:
        """Whether an idle-poll loop is currently scheduled."""
        return self._loop_alive

    def idle_for_ms(self) -> float:
        """Milliseconds since the last recorded activity."""
        return self._clock.now() - self.state.last_activity_at

    def start(self, inactivity_timeout_ms: int) -> None:
        """Subscribe to activity signals and begin polling.

        Calling start on a running monitor updates the threshold and resets
        the activity clock without adding a second loop.

        Args:
            inactivity_timeout_ms: Idle duration that triggers ``on_idle``.
        """
        self._inactivity_timeout_ms = inactivity_timeout_ms
        self.state.last_activity_at = self._clock.now()
        self._subscribe()

        self.state.monitoring = True
        if not self._loop_alive:
            self._loop_alive = True
            self._check()

    def stop(self) -> None:
        """Stop polling and release every subscription. Idempotent."""
        self.state.monitoring = False
        for target, event_type, handler in self._subscriptions:
            target.remove_listener(event_type, handler)
        self._subscriptions.clear()

    def touch(self) -> None:
        """Record activity now."""
        self.state.last_activity_at = self._clock.now()

    def _subscribe(self) -> None:
        if self._subscriptions:
            return
        for event_type in ACTIVITY_EVENTS:
            self._listen(self._window, event_type, self._handle_activity)
        self._listen(self._window, "focus", self._handle_focus)
        self._listen(self._window, "blur", self._handle_blur)
        self._listen(self._document, "visibilitychange", self._handle_visibility_change)

    def _listen(self, target: EventTarget, event_type: str, handler: Callable[[Any], None]) -> None:
        target.add_listener(event_type, handler)
        self._subscriptions.append((target, event_type, handler))

    def _handle_activity(self, event: Any = None) -> None:
        self.touch()

    def _handle_focus(self, event: Any = None) -> None:
        self.state.window_focused = True
        self.touch()

    def _handle_blur(self, event: Any = None) -> None:
        self.state.window_focused = False

    def _handle_visibility_change(self, event: Any = None) -> None:
        visible = self._document.visibility_state == VisibilityState.VISIBLE
        self.state.window_focused = visible
        if visible:
            self.touch()

    def _check(self) -> None:
        """One iteration of the idle-poll loop."""
        if not self.state.monitoring:
            self._loop_alive = False
            return

        try:
            if self.idle_for_ms() >= self._inactivity_timeout_ms and not self._warning_shown():
                logger.info(f"Idle for {self.idle_for_ms() / 1000:.0f}s, raising warning")
                self._on_idle()
        except Exception:
            logger.exception("Idle check failed; monitoring continues")

        if self.state.monitoring:
            self._scheduler.schedule_next(self._check)
        else:
            self._loop_alive = False
