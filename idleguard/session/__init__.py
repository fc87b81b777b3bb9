"""Session state machine."""

from idleguard.session.guard import SessionGuard, SessionState

__all__ = ["SessionGuard", "SessionState"]
