"""User activity tracking and idle detection."""

from idleguard.activity.monitor import ACTIVITY_EVENTS, ActivityMonitor, ActivityState

__all__ = ["ACTIVITY_EVENTS", "ActivityMonitor", "ActivityState"]
