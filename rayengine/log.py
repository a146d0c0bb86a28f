"""Console logging with a fixed severity threshold."""

from __future__ import annotations

import enum
import threading

__all__ = ["LogLevel", "info", "debug", "warn", "error"]


class LogLevel(enum.IntEnum):
    """Severity levels; a message is shown when its level is at or below the threshold."""

    ERROR = 1
    WARNING = 2
    DEBUG = 3
    INFO = 4


_THRESHOLD = LogLevel.WARNING
_lock = threading.Lock()


def _emit(level: LogLevel, tag: str, message: str) -> None:
    if _THRESHOLD >= level:
        with _lock:
            print(f"[{tag}] {message}", flush=True)


def info(message: str) -> None:
    """Log a message with the [INFO] tag."""
    _emit(LogLevel.INFO, "INFO", message)


def debug(message: str) -> None:
    """Log a message with the [DEBUG] tag."""
    _emit(LogLevel.DEBUG, "DEBUG", message)


def warn(message: str) -> None:
    """Log a message with the [WARN] tag."""
    _emit(LogLevel.WARNING, "WARN", message)


def error(message: str) -> None:
    """Log a message with the [ERROR] tag."""
    _emit(LogLevel.ERROR, "ERROR", message)