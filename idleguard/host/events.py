"""Minimal DOM-style event targets."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from idleguard.logger import get_logger

logger = get_logger()

Handler = Callable[[Any], None]


class VisibilityState(str, Enum):
    """Document visibility as reported by the host."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


class EventTarget:
    """Named-event listener registry.

    Handlers run in registration order. A handler that raises is logged and
    skipped; it never stops the remaining handlers or escapes ``dispatch``.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Handler]] = {}

    def add_listener(self, event_type: str, handler: Handler) -> None:
        handlers = self._listeners.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def remove_listener(self, event_type: str, handler: Handler) -> None:
        handlers = self._listeners.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str | None = None) -> int:
        """Count registered handlers, for one event type or all of them."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(h) for h in self._listeners.values())

    def dispatch(self, event_type: str, event: Any = None) -> None:
        """Deliver an event to every handler registered for ``event_type``.

        Args:
            event_type: Event name (e.g. "mousemove").
            event: Optional payload passed to handlers.
        """
        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Handler for '{event_type}' failed")


class Document(EventTarget):
    """Event target that also tracks page visibility."""

    def __init__(self) -> None:
        super().__init__()
        self.visibility_state = VisibilityState.VISIBLE

    def set_visibility(self, state: VisibilityState) -> None:
        """Update visibility and fire ``visibilitychange`` if it changed."""
        if state == self.visibility_state:
            return
        self.visibility_state = state
        self.dispatch("visibilitychange")
