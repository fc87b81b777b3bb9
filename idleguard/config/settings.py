"""Guard configuration dataclasses and payload merging.

A fetched payload is nested by section::

    timeout_settings: {inactivity_timeout, logout_countdown, show_countdown}
    modal_content:    {modal_title, modal_message, continue_button_label, logout_button_label}
    modal_style:      {modal_header_color, ..., modal_width, modal_border_radius}
    action_settings:  {post_timeout_action, redirect_url, logout_path}
    logo_url, logo_image

Every field falls back to the default when absent, empty or invalid.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from idleguard.logger import get_logger

logger = get_logger()

DEFAULT_INACTIVITY_TIMEOUT_MS = 300_000
DEFAULT_LOGOUT_COUNTDOWN_MS = 10_000
DEFAULT_LOGOUT_PATH = "/secur/logout.jsp"
DEFAULT_LOGO_URL = "/resource/LogoUrl"
DEFAULT_MODAL_MESSAGE = "Your session is about to expire due to inactivity."


class PostTimeoutAction(str, Enum):
    """Terminal action performed when the session ends."""

    LOGOUT = "logout"
    REDIRECT = "redirect"

    @classmethod
    def parse(cls, value: Any, default: "PostTimeoutAction | None" = None) -> "PostTimeoutAction":
        """Parse an action name, falling back to ``default`` (or LOGOUT)."""
        fallback = default or cls.LOGOUT
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip():
            try:
                return cls(value.strip().lower())
            except ValueError:
                logger.warning(f"Unknown post-timeout action {value!r}, using {fallback.value}")
        return fallback


def positive_int(value: Any, default: int) -> int:
    """Coerce ``value`` to a strictly positive int, or return ``default``.

    Booleans, NaN, infinities, non-numeric strings and values <= 0 are
    rejected.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid timeout {value!r}, using default {default}")
        return default
    if not math.isfinite(number) or int(number) <= 0:
        logger.warning(f"Invalid timeout {value!r}, using default {default}")
        return default
    return int(number)


def _text(data: Mapping[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.warning(f"Ignoring malformed config section '{key}': {value!r}")
        return {}
    return value


@dataclass(frozen=True)
class TimeoutConfig:
    """Idle threshold and warning duration."""

    inactivity_timeout_ms: int = DEFAULT_INACTIVITY_TIMEOUT_MS
    logout_countdown_ms: int = DEFAULT_LOGOUT_COUNTDOWN_MS
    show_countdown: bool = False

    def __post_init__(self) -> None:
        # Frozen: normalize through object.__setattr__
        object.__setattr__(
            self,
            "inactivity_timeout_ms",
            positive_int(self.inactivity_timeout_ms, DEFAULT_INACTIVITY_TIMEOUT_MS),
        )
        object.__setattr__(
            self,
            "logout_countdown_ms",
            positive_int(self.logout_countdown_ms, DEFAULT_LOGOUT_COUNTDOWN_MS),
        )

    @property
    def countdown_seconds(self) -> int:
        """Whole seconds shown when the warning opens."""
        return self.logout_countdown_ms // 1000

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], defaults: "TimeoutConfig | None" = None
    ) -> "TimeoutConfig":
        """Create from a ``timeout_settings`` section.

        Args:
            data: Section mapping (values in milliseconds).
            defaults: Values used for absent or invalid fields.

        Returns:
            TimeoutConfig instance.
        """
        base = defaults or cls()
        show = data.get("show_countdown")
        return cls(
            inactivity_timeout_ms=positive_int(
                data.get("inactivity_timeout"), base.inactivity_timeout_ms
            ),
            logout_countdown_ms=positive_int(
                data.get("logout_countdown"), base.logout_countdown_ms
            ),
            show_countdown=show if isinstance(show, bool) and show else base.show_countdown,
        )


@dataclass(frozen=True)
class ActionSettings:
    """What happens when the session ends."""

    post_timeout_action: PostTimeoutAction = PostTimeoutAction.LOGOUT
    redirect_url: str = ""
    logout_path: str = DEFAULT_LOGOUT_PATH

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], defaults: "ActionSettings | None" = None
    ) -> "ActionSettings":
        base = defaults or cls()
        return cls(
            post_timeout_action=PostTimeoutAction.parse(
                data.get("post_timeout_action"), base.post_timeout_action
            ),
            redirect_url=_text(data, "redirect_url", base.redirect_url),
            logout_path=_text(data, "logout_path", base.logout_path),
        )


@dataclass(frozen=True)
class ModalContent:
    """Text shown in the warning modal."""

    modal_title: str = "Session Timeout"
    modal_message: str = ""
    continue_button_label: str = "Continue Session"
    logout_button_label: str = "Log Out"

    @property
    def display_message(self) -> str:
        return self.modal_message or DEFAULT_MODAL_MESSAGE

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], defaults: "ModalContent | None" = None
    ) -> "ModalContent":
        base = defaults or cls()
        return cls(
            modal_title=_text(data, "modal_title", base.modal_title),
            modal_message=_text(data, "modal_message", base.modal_message),
            continue_button_label=_text(data, "continue_button_label", base.continue_button_label),
            logout_button_label=_text(data, "logout_button_label", base.logout_button_label),
        )


@dataclass(frozen=True)
class ModalStyle:
    """Colors (hex strings) and sizes (CSS-like "480px") of the warning modal."""

    modal_header_color: str = "#16325C"
    modal_body_color: str = "#FFFFFF"
    modal_footer_color: str = "#F3F3F3"
    continue_button_color: str = "#0176D3"
    logout_button_color: str = "#BA0517"
    countdown_color: str = "#BA0517"
    modal_width: str = "480px"
    modal_border_radius: str = "8px"

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], defaults: "ModalStyle | None" = None
    ) -> "ModalStyle":
        base = defaults or cls()
        return cls(
            **{name: _text(data, name, getattr(base, name)) for name in cls.__dataclass_fields__}
        )


@dataclass(frozen=True)
class LogoSettings:
    """Logo shown in the modal header."""

    logo_url: str = DEFAULT_LOGO_URL
    logo_image: str = f"{DEFAULT_LOGO_URL}/logoImage.png"


@dataclass(frozen=True)
class GuardConfig:
    """Complete guard configuration."""

    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    action: ActionSettings = field(default_factory=ActionSettings)
    content: ModalContent = field(default_factory=ModalContent)
    style: ModalStyle = field(default_factory=ModalStyle)
    logo: LogoSettings = field(default_factory=LogoSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GuardConfig":
        """Create from a payload, using built-in defaults for the rest."""
        return merge_config(cls(), data)


def merge_config(defaults: GuardConfig, partial: Mapping[str, Any] | None) -> GuardConfig:
    """Overlay a fetched payload on ``defaults``.

    Pure: no I/O, ``defaults`` is not modified.

    Args:
        defaults: Configuration supplying every fallback value.
        partial: Nested payload, possibly incomplete, ``None`` or malformed.

    Returns:
        New GuardConfig.
    """
    if partial is None:
        return defaults
    if not isinstance(partial, Mapping):
        logger.warning(f"Ignoring malformed config payload: {partial!r}")
        return defaults

    logo_url = _text(partial, "logo_url", defaults.logo.logo_url)
    logo_image = _text(partial, "logo_image", f"{defaults.logo.logo_url}/logoImage.png")

    return GuardConfig(
        timeouts=TimeoutConfig.from_dict(_section(partial, "timeout_settings"), defaults.timeouts),
        action=ActionSettings.from_dict(_section(partial, "action_settings"), defaults.action),
        content=ModalContent.from_dict(_section(partial, "modal_content"), defaults.content),
        style=ModalStyle.from_dict(_section(partial, "modal_style"), defaults.style),
        logo=LogoSettings(logo_url=logo_url, logo_image=logo_image),
    )
