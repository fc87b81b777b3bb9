"""Adapters for the page hosting the guard."""

from idleguard.host.events import Document, EventTarget, VisibilityState
from idleguard.host.location import Location
from idleguard.host.navigation import BrowserNavigator, Navigator
from idleguard.host.page import PageContext
from idleguard.host.storage import FileStorage, MemoryStorage, SessionStorage

__all__ = [
    "EventTarget",
    "Document",
    "VisibilityState",
    "Location",
    "Navigator",
    "BrowserNavigator",
    "PageContext",
    "SessionStorage",
    "MemoryStorage",
    "FileStorage",
]
