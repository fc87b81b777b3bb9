"""Bundle of host adapters a guard attaches to."""

from dataclasses import dataclass, field

from idleguard.host.events import Document, EventTarget
from idleguard.host.location import Location
from idleguard.host.navigation import Navigator
from idleguard.host.storage import MemoryStorage, SessionStorage


@dataclass
class PageContext:
    """The page: window and document event targets, location, storage, navigator."""

    location: Location
    navigator: Navigator
    window: EventTarget = field(default_factory=EventTarget)
    document: Document = field(default_factory=Document)
    storage: SessionStorage = field(default_factory=MemoryStorage)
