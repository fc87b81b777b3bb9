"""Idle-session guard: inactivity watch, countdown warning and terminal action."""

__version__ = "0.1.0"
