"""Pygame presentation of the guard."""

from idleguard.ui.window import GuardWindow

__all__ = ["GuardWindow"]
