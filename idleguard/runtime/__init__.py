"""Desktop runtime wiring config, host window and guard."""

from idleguard.runtime.controller import RuntimeController

__all__ = ["RuntimeController"]
