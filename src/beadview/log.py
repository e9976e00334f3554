"""Leveled terminal logging for beadview commands.

Every log line goes to stderr; stdout is reserved for command output such as
JSON payloads and tables.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import IntEnum

from rich.console import Console
from rich.text import Text

LOG_LEVEL_ENV = "BEADVIEW_LOG_LEVEL"
NO_COLOR_ENVS = ("NO_COLOR", "BEADVIEW_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)

_ALIASES = {"warn": LogLevel.WARNING}
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}


def parse_level(value: str | None, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Map a level name to a ``LogLevel``; unknown or blank names give ``default``.

    Example:
        >>> parse_level("Debug").name
        'DEBUG'
        >>> parse_level("loud").name
        'INFO'
    """
    normalized = (value or "").strip().lower()
    if normalized in _ALIASES:
        return _ALIASES[normalized]
    try:
        return LogLevel[normalized.upper()]
    except KeyError:
        return default


@dataclass
class LogSettings:
    """Runtime overrides set from CLI flags; ``None`` defers to the environment."""

    level: LogLevel | None = None
    no_color: bool | None = None

    def effective_level(self) -> LogLevel:
        if self.level is None:
            self.level = parse_level(os.environ.get(LOG_LEVEL_ENV))
        return self.level

    def colour_disabled(self) -> bool:
        if self.no_color is not None:
            return self.no_color
        return any(os.environ.get(name) for name in NO_COLOR_ENVS)


_settings = LogSettings()


def set_level(value: str | None) -> None:
    """Set the active log level."""
    _settings.level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colour output off (``True``) or defer to the environment."""
    _settings.no_color = True if value else None


def no_color() -> bool:
    return _settings.colour_disabled()


def is_enabled(level: LogLevel) -> bool:
    return level >= _settings.effective_level()


def console(*, stderr: bool = False) -> Console:
    """Return a console honouring the active colour settings."""
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=no_color(),
    )


def emit(level: LogLevel, message: str, *, style: str | None = None) -> None:
    if not is_enabled(level):
        return
    console(stderr=True).print(Text(message, style=style or _STYLES.get(level, "")))


def trace(message: str) -> None:
    emit(LogLevel.TRACE, message)


def debug(message: str) -> None:
    emit(LogLevel.DEBUG, message)


def info(message: str) -> None:
    emit(LogLevel.INFO, message)


def success(message: str) -> None:
    emit(LogLevel.SUCCESS, message)


def warning(message: str) -> None:
    emit(LogLevel.WARNING, message)


def error(message: str) -> None:
    emit(LogLevel.ERROR, message)
