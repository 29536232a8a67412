"""
Severity levels and their console colors.
"""

from __future__ import annotations

import logging
from enum import IntEnum

LABEL_WIDTH = 7

RESET = "\x1b[0m"
DEFAULT_COLOR = "\x1b[37m"  # white


class Severity(IntEnum):
    """Ordered log severities, least to most severe."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50
    PANIC = 60

    @property
    def short_name(self) -> str:
        return self.name.lower()

    @property
    def label(self) -> str:
        """Fixed-width label with only the first character capitalized."""
        padded = f"{self.short_name:<{LABEL_WIDTH}}"
        return padded[0].upper() + padded[1:]

    @classmethod
    def parse(cls, name: str) -> Severity:
        key = name.strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown severity: {name!r}") from None

    @classmethod
    def from_stdlib(cls, levelno: int) -> Severity:
        """Map a stdlib ``logging`` level number onto the closest severity."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}

LEVEL_COLORS: dict[Severity, str] = {
    Severity.TRACE: "\x1b[90m",  # grey
    Severity.DEBUG: "\x1b[34m",  # blue
    Severity.INFO: "\x1b[97m",  # bright white
    Severity.WARN: "\x1b[33m",  # yellow
    Severity.ERROR: "\x1b[31m",  # red
    Severity.FATAL: "\x1b[35m",  # magenta
    Severity.PANIC: "\x1b[35m",  # magenta
}


def color_for(level: Severity) -> str:
    """Return the ANSI prefix for ``level``, white when unmapped."""
    return LEVEL_COLORS.get(level, DEFAULT_COLOR)


ALL_LEVELS: frozenset[Severity] = frozenset(Severity)
