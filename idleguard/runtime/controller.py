"""Runtime controller that wires the desktop host together."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from idleguard.config.source import YamlConfigSource
from idleguard.host.location import Location
from idleguard.host.navigation import BrowserNavigator
from idleguard.host.page import PageContext
from idleguard.host.storage import FileStorage
from idleguard.logger import configure, get_logger
from idleguard.session.guard import SessionGuard
from idleguard.timing.scheduler import FrameScheduler
from idleguard.ui.window import GuardWindow

logger = get_logger()

DEFAULT_CONFIG_PATH = Path("config/default.yaml")


@dataclass
class HostConfig:
    """Desktop host settings (the ``host`` section of the config file)."""

    page_url: str = "https://localhost/home"
    storage_path: Path = Path("data/session_storage.json")
    log_path: Path | None = None
    resolution: tuple[int, int] = (800, 600)
    fps: int = 30

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HostConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            HostConfig instance.
        """
        res = data.get("resolution", [800, 600])
        log_path = data.get("log_path")
        return cls(
            page_url=str(data.get("page_url", "https://localhost/home")),
            storage_path=Path(data.get("storage_path", "data/session_storage.json")),
            log_path=Path(log_path) if log_path else None,
            resolution=(int(res[0]), int(res[1])) if res else (800, 600),
            fps=int(data.get("fps", 30)),
        )


class RuntimeController:
    """Builds the page, guard and window, then runs the frame loop."""

    def __init__(self, config_path: Path | None = None, page_url: str | None = None) -> None:
        """Initialize the runtime controller.

        Args:
            config_path: Path to configuration YAML file.
            page_url: URL of the simulated page; overrides the config file.
        """
        load_dotenv()

        env_config = os.environ.get("IDLEGUARD_CONFIG")
        self.config_path = config_path or (Path(env_config) if env_config else DEFAULT_CONFIG_PATH)
        self.host_config = HostConfig.from_dict(self._load_host_section(self.config_path))

        url = page_url or os.environ.get("IDLEGUARD_PAGE_URL")
        if url:
            self.host_config.page_url = url

        configure(self.host_config.log_path)

        self.scheduler = FrameScheduler()
        self.page = PageContext(
            location=Location(self.host_config.page_url),
            navigator=BrowserNavigator(),
            storage=FileStorage(self.host_config.storage_path),
        )
        self.guard = SessionGuard(
            page=self.page,
            config_source=YamlConfigSource(self.config_path),
            scheduler=self.scheduler,
        )
        self.window: GuardWindow | None = None
        self._running = False

    def _load_host_section(self, config_path: Path) -> dict[str, Any]:
        if not config_path.exists():
            return {}
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Cannot read host settings from {config_path}: {e}")
            return {}
        host = loaded.get("host", {}) if isinstance(loaded, dict) else {}
        return host if isinstance(host, dict) else {}

    def start(self) -> None:
        """Attach the guard, open the window and run until closed."""
        armed = self.guard.attach()
        if not armed:
            logger.info("Guard not armed for this run")

        self.window = GuardWindow(
            guard=self.guard,
            page=self.page,
            scheduler=self.scheduler,
            resolution=self.host_config.resolution,
            fps=self.host_config.fps,
        )
        self.window.initialize()
        self._running = True
        logger.info(f"idleguard watching {self.host_config.page_url}. Close the window to quit.")

        self._main_loop()

    def stop(self) -> None:
        """Detach the guard and close the window."""
        self._running = False
        self.guard.detach()
        if self.window:
            self.window.shutdown()
        logger.info("idleguard stopped.")

    def _main_loop(self) -> None:
        """Main render/event loop."""
        while self._running and self.window:
            if not self.window.run_frame():
                break
        self.stop()
