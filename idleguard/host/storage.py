"""Durable session storage for the one-shot logged-out flag."""

import json
from pathlib import Path
from typing import Protocol

from idleguard.logger import get_logger

logger = get_logger()

# Set at terminal logout, consumed at the next attach
LOGOUT_FLAG_KEY = "sessionTimeoutLogout"


class SessionStorage(Protocol):
    """String key/value store surviving a page navigation."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """JSON-file storage, so the flag survives restarting the host process."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, items: dict[str, str]) -> None:
        """Write through a sibling temp file so a crash never leaves half a file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._save(items)
