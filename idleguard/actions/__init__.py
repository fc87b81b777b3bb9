"""Terminal actions: redirect or system logout."""

from idleguard.actions.dispatcher import ActionDispatcher, normalize_redirect_url

__all__ = ["ActionDispatcher", "normalize_redirect_url"]
