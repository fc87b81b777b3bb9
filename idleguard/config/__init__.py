"""Guard configuration: dataclasses, merging and sources."""

from idleguard.config.settings import (
    ActionSettings,
    GuardConfig,
    LogoSettings,
    ModalContent,
    ModalStyle,
    PostTimeoutAction,
    TimeoutConfig,
    merge_config,
)
from idleguard.config.source import ConfigSource, StaticConfigSource, YamlConfigSource

__all__ = [
    "ActionSettings",
    "GuardConfig",
    "LogoSettings",
    "ModalContent",
    "ModalStyle",
    "PostTimeoutAction",
    "TimeoutConfig",
    "merge_config",
    "ConfigSource",
    "StaticConfigSource",
    "YamlConfigSource",
]
