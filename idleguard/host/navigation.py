"""Navigation primitives."""

import webbrowser
from typing import Protocol

from idleguard.logger import get_logger

logger = get_logger()


class Navigator(Protocol):
    """Performs a one-way navigation to an absolute URL."""

    def navigate(self, url: str) -> None: ...


class BrowserNavigator:
    """Opens the target in the system web browser."""

    def __init__(self) -> None:
        self.last_url: str | None = None

    def navigate(self, url: str) -> None:
        logger.info(f"Navigating to {url}")
        self.last_url = url
        if not webbrowser.open(url):
            logger.warning(f"No browser available to open {url}")
