"""Exception types."""


class IdleGuardError(Exception):
    """Base class for idleguard errors."""


class ConfigError(IdleGuardError):
    """Configuration payload could not be fetched or parsed."""


class RedirectResolutionError(IdleGuardError):
    """A redirect target could not be resolved to a navigable URL."""
