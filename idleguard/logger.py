"""Logging setup for idleguard."""

import sys
from pathlib import Path

from loguru import logger as _logger

_LOG_INITIALISED = False


def configure(log_path: Path | None = None, level: str = "INFO") -> None:
    """Configure loguru sinks once.

    Args:
        log_path: Optional file sink (rotated at 10 MB).
        level: Console log level.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return

    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level=level)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_path,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    return _logger
