"""Shared test fixtures."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from idleguard.config.settings import GuardConfig, TimeoutConfig
from idleguard.host.location import Location
from idleguard.host.page import PageContext
from idleguard.timing.scheduler import FrameScheduler


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now_ms = start

    def now(self) -> float:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> FrameScheduler:
    return FrameScheduler()


@pytest.fixture
def advance(clock: FakeClock, scheduler: FrameScheduler) -> Callable[..., None]:
    """Step the clock in frames, draining the scheduler after each one."""

    def _advance(ms: int, step: int = 100) -> None:
        for _ in range(ms // step):
            clock.advance(step)
            scheduler.run_pending()

    return _advance


@pytest.fixture
def navigator() -> MagicMock:
    return MagicMock()


@pytest.fixture
def page(navigator: MagicMock) -> PageContext:
    """A page at https://example.com/home with in-memory storage."""
    return PageContext(location=Location("https://example.com/home"), navigator=navigator)


@pytest.fixture
def community_page(navigator: MagicMock) -> PageContext:
    return PageContext(
        location=Location("https://example.com/help/s/article/42"), navigator=navigator
    )


@pytest.fixture
def fast_config() -> GuardConfig:
    """Short timeouts: 5s idle, 3s warning."""
    return GuardConfig(
        timeouts=TimeoutConfig(inactivity_timeout_ms=5000, logout_countdown_ms=3000)
    )
