"""Configuration sources consulted once when the guard attaches."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import yaml

from idleguard.errors import ConfigError


class ConfigSource(Protocol):
    """Fetches the nested settings payload."""

    def fetch(self) -> Mapping[str, Any] | None:
        """Fetch the payload.

        Returns:
            Settings mapping, or None when nothing is configured.

        Raises:
            ConfigError: If the payload cannot be fetched or parsed.
        """
        ...


class StaticConfigSource:
    """Serves an in-memory payload."""

    def __init__(self, payload: Mapping[str, Any] | None = None) -> None:
        self._payload = payload

    def fetch(self) -> Mapping[str, Any] | None:
        return self._payload


class YamlConfigSource:
    """Reads the payload from a YAML file.

    The file may hold the payload at the top level or under a ``guard`` key.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def fetch(self) -> Mapping[str, Any] | None:
        if not self.path.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {self.path}: {e}") from e

        if data is None:
            return None
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config {self.path} must be a mapping, got {type(data).__name__}")

        section = data.get("guard", data)
        if not isinstance(section, Mapping):
            raise ConfigError(f"'guard' section in {self.path} must be a mapping")
        return section
