"""Session guard: the umbrella state machine.

    INACTIVE --arm--> WATCHING --idle--> WARNING --continue--> WATCHING
                                            |
                          expiry / logout   v
                                       TERMINATED

Events arriving in a state that does not accept them are ignored, so
duplicate signals from overlapping listeners cannot corrupt the state.
"""

from collections.abc import Callable
from enum import Enum, auto

from idleguard.actions.dispatcher import ActionDispatcher
from idleguard.activity.monitor import ActivityMonitor
from idleguard.config.settings import GuardConfig, merge_config
from idleguard.config.source import ConfigSource
from idleguard.countdown.engine import CountdownEngine
from idleguard.host.page import PageContext
from idleguard.host.storage import LOGOUT_FLAG_KEY
from idleguard.logger import get_logger
from idleguard.timing.clock import Clock, MonotonicClock
from idleguard.timing.scheduler import Scheduler, default_scheduler

logger = get_logger()


class SessionState(Enum):
    """Externally observable guard states."""

    INACTIVE = auto()  # Not armed, or detached
    WATCHING = auto()  # Polling for inactivity
    WARNING = auto()  # Countdown visible and running
    TERMINATED = auto()  # Terminal action performed; absorbing until re-attach


class SessionEvent(Enum):
    """Inputs to the guard state machine."""

    ARM = auto()
    IDLE = auto()
    CONTINUE = auto()
    EXPIRE = auto()
    LOGOUT = auto()
    DETACH = auto()


_TRANSITIONS: dict[tuple[SessionState, SessionEvent], SessionState] = {
    (SessionState.INACTIVE, SessionEvent.ARM): SessionState.WATCHING,
    (SessionState.WATCHING, SessionEvent.IDLE): SessionState.WARNING,
    (SessionState.WARNING, SessionEvent.CONTINUE): SessionState.WATCHING,
    (SessionState.WARNING, SessionEvent.EXPIRE): SessionState.TERMINATED,
    (SessionState.WATCHING, SessionEvent.LOGOUT): SessionState.TERMINATED,
    (SessionState.WARNING, SessionEvent.LOGOUT): SessionState.TERMINATED,
    (SessionState.INACTIVE, SessionEvent.DETACH): SessionState.INACTIVE,
    (SessionState.WATCHING, SessionEvent.DETACH): SessionState.INACTIVE,
    (SessionState.WARNING, SessionEvent.DETACH): SessionState.INACTIVE,
    (SessionState.TERMINATED, SessionEvent.DETACH): SessionState.INACTIVE,
}


class SessionGuard:
    """Coordinates the activity monitor, countdown and action dispatcher."""

    def __init__(
        self,
        page: PageContext,
        config_source: ConfigSource | None = None,
        defaults: GuardConfig | None = None,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize the guard.

        Args:
            page: Host adapters (event targets, location, storage, navigator).
            config_source: Consulted once per attach; None keeps the defaults.
            defaults: Built-in configuration used for anything not fetched.
            clock: Millisecond clock. Defaults to monotonic time.
            scheduler: Yield primitive for both loops. Defaults to the running
                asyncio loop.

        Raises:
            RuntimeError: If no scheduler is given and no asyncio loop is running.
        """
        self._page = page
        self._config_source = config_source
        self._defaults = defaults or GuardConfig()
        self._clock = clock or MonotonicClock()
        self._scheduler = scheduler or default_scheduler()

        self._config = self._defaults
        self._state = SessionState.INACTIVE
        self._listeners: list[Callable[[SessionState], None]] = []

        self._monitor = ActivityMonitor(
            window=page.window,
            document=page.document,
            clock=self._clock,
            scheduler=self._scheduler,
            on_idle=self.on_idle_detected,
            warning_shown=lambda: self.show_timeout_modal,
        )
        self._countdown = CountdownEngine(
            clock=self._clock,
            scheduler=self._scheduler,
            on_expired=self.on_expiry,
        )
        self._dispatcher = ActionDispatcher(page.location, page.navigator)

    # -- observable outputs --------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> GuardConfig:
        return self._config

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def monitor(self) -> ActivityMonitor:
        return self._monitor

    @property
    def countdown_engine(self) -> CountdownEngine:
        return self._countdown

    @property
    def show_timeout_modal(self) -> bool:
        return self._state == SessionState.WARNING

    @property
    def countdown(self) -> int:
        """Seconds left on the warning (the seeded value while not running)."""
        return self._countdown.remaining_seconds

    @property
    def is_counting_down(self) -> bool:
        return self._countdown.is_running

    def add_state_listener(self, listener: Callable[[SessionState], None]) -> None:
        """Register a callback invoked with the new state after each transition."""
        self._listeners.append(listener)

    # -- lifecycle -----------------------------------------------------------

    def attach(self) -> bool:
        """Attach to the page and arm the guard.

        A logged-out flag left by the previous page is consumed instead, and
        the guard stays unarmed for this page load.

        Returns:
            True if the guard was armed.
        """
        if self._state != SessionState.INACTIVE:
            logger.debug(f"attach() ignored in state {self._state.name}")
            return False

        storage = self._page.storage
        if storage.get_item(LOGOUT_FLAG_KEY):
            storage.remove_item(LOGOUT_FLAG_KEY)
            logger.info("Session ended on the previous page; guard not armed")
            return False

        self._config = self._fetch_config()
        self._countdown.reset(self._config.timeouts.logout_countdown_ms)
        self._transition(SessionEvent.ARM)
        self._monitor.start(self._config.timeouts.inactivity_timeout_ms)
        return True

    def detach(self) -> None:
        """Release listeners and stop both loops."""
        self._monitor.stop()
        self._countdown.cancel()
        self._transition(SessionEvent.DETACH)

    def _fetch_config(self) -> GuardConfig:
        if self._config_source is None:
            return self._defaults
        try:
            payload = self._config_source.fetch()
        except Exception as e:
            logger.warning(f"Config fetch failed, using defaults: {e}")
            return self._defaults
        return merge_config(self._defaults, payload)

    # -- state machine -------------------------------------------------------

    def _transition(self, event: SessionEvent) -> bool:
        target = _TRANSITIONS.get((self._state, event))
        if target is None:
            logger.debug(f"Ignoring {event.name} in state {self._state.name}")
            return False

        previous, self._state = self._state, target
        if previous != target:
            logger.info(f"Session {previous.name} -> {target.name} ({event.name})")
            for listener in list(self._listeners):
                try:
                    listener(target)
                except Exception:
                    logger.exception("Session state listener failed")
        return True

    def on_idle_detected(self) -> None:
        """Inactivity threshold crossed: show the warning and start counting."""
        if not self._transition(SessionEvent.IDLE):
            return
        self._countdown.start(self._config.timeouts.logout_countdown_ms)

    def on_continue(self) -> None:
        """User chose to stay: dismiss the warning and resume watching."""
        if not self._transition(SessionEvent.CONTINUE):
            return
        self._countdown.cancel()
        self._monitor.touch()
        if not self._monitor.monitoring:
            self._monitor.start(self._config.timeouts.inactivity_timeout_ms)

    def on_expiry(self) -> None:
        """Countdown reached zero."""
        if self._transition(SessionEvent.EXPIRE):
            self._terminate()

    def on_manual_logout(self) -> None:
        """User chose to log out now."""
        if self._transition(SessionEvent.LOGOUT):
            self._terminate()

    def _terminate(self) -> None:
        self._monitor.stop()
        self._countdown.cancel()
        self._page.storage.set_item(LOGOUT_FLAG_KEY, "true")
        self._dispatcher.dispatch(self._config.action)

    # -- user interaction ----------------------------------------------------

    def manual_decrement(self) -> None:
        """Take a second off the visible countdown."""
        if self._state == SessionState.WARNING:
            self._countdown.manual_decrement()

    def handle_keydown(self, key: str) -> None:
        """Escape while the warning is shown counts as continue."""
        if key == "Escape" and self.show_timeout_modal:
            self.on_continue()
