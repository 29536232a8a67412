"""
Leveled logging with per-sink routing.

Each event is rendered by every hook whose level set contains it:
- console: ANSI-colored text on stdout
- file: plain text in a size-rotated log file

Library: structlog for the emission pipeline, pydantic-settings for configuration.
"""

from .core import Logger, build_level_plan, init_logging
from .events import Caller, LogEvent
from .exceptions import DirectoryCreationFailed, LogPanic, RotationFailed, WriteFailed
from .levels import Severity

__all__ = [
    "Caller",
    "DirectoryCreationFailed",
    "LogEvent",
    "LogPanic",
    "Logger",
    "RotationFailed",
    "Severity",
    "WriteFailed",
    "build_level_plan",
    "init_logging",
]
