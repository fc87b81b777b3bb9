"""Tests for the desktop runtime and CLI."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from idleguard.main import main
from idleguard.runtime.controller import HostConfig, RuntimeController
from idleguard.session.guard import SessionState


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IDLEGUARD_CONFIG", raising=False)
    monkeypatch.delenv("IDLEGUARD_PAGE_URL", raising=False)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
host:
  page_url: "https://portal.example.com/home"
  storage_path: "{(tmp_path / 'storage.json').as_posix()}"
  resolution: [640, 480]
  fps: 15
guard:
  timeout_settings:
    inactivity_timeout: 60000
"""
    )
    return path


class TestHostConfig:
    def test_default_values(self) -> None:
        config = HostConfig()
        assert config.page_url == "https://localhost/home"
        assert config.resolution == (800, 600)
        assert config.fps == 30
        assert config.log_path is None

    def test_from_dict(self) -> None:
        config = HostConfig.from_dict(
            {"page_url": "https://x.example/", "resolution": [1024, 768], "log_path": "l.log"}
        )
        assert config.page_url == "https://x.example/"
        assert config.resolution == (1024, 768)
        assert config.log_path == Path("l.log")


class TestRuntimeController:
    def test_reads_host_and_guard_config(self, config_path: Path) -> None:
        controller = RuntimeController(config_path=config_path)

        assert controller.host_config.page_url == "https://portal.example.com/home"
        assert controller.host_config.resolution == (640, 480)
        assert controller.page.location.host == "portal.example.com"

    def test_url_argument_overrides_config(self, config_path: Path) -> None:
        controller = RuntimeController(config_path=config_path, page_url="https://a.example/x")
        assert controller.page.location.origin == "https://a.example"

    def test_env_overrides(self, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDLEGUARD_CONFIG", str(config_path))
        monkeypatch.setenv("IDLEGUARD_PAGE_URL", "https://env.example/")

        controller = RuntimeController()

        assert controller.config_path == config_path
        assert controller.host_config.page_url == "https://env.example/"

    @patch("idleguard.runtime.controller.GuardWindow")
    def test_start_attaches_and_stops_when_window_closes(
        self, mock_window, config_path: Path
    ) -> None:
        mock_window.return_value.run_frame.return_value = False
        controller = RuntimeController(config_path=config_path)

        controller.start()

        assert controller.guard.config.timeouts.inactivity_timeout_ms == 60000
        mock_window.return_value.initialize.assert_called_once()
        mock_window.return_value.shutdown.assert_called_once()
        assert controller.guard.state == SessionState.INACTIVE


class TestMain:
    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(sys, "argv", ["idleguard", "--version"]):
            assert main() == 0
        assert "idleguard v" in capsys.readouterr().out

    @patch("idleguard.main.RuntimeController")
    def test_error_returns_one(self, mock_controller) -> None:
        mock_controller.return_value.start.side_effect = RuntimeError("no display")
        with patch.object(sys, "argv", ["idleguard"]):
            assert main() == 1
