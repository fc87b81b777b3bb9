"""Warning countdown."""

from idleguard.countdown.engine import CountdownEngine, CountdownPhase, CountdownState

__all__ = ["CountdownEngine", "CountdownPhase", "CountdownState"]
