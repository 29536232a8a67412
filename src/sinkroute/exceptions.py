"""
Exception hierarchy for the logging core.

Initialization errors propagate to the caller. Write errors stop at the
Logger facade and are reported on the stderr side channel.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, Optional


class SinkrouteError(Exception):
    """Base class for every error raised by sinkroute."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class DirectoryCreationFailed(SinkrouteError):
    """The log directory could not be created during initialization."""

    def __init__(self, directory: str, reason: str) -> None:
        super().__init__(
            f"cannot create log directory '{directory}': {reason}",
            code="DIRECTORY_CREATION_FAILED",
            details={"directory": directory, "reason": reason},
        )


class WriteFailed(SinkrouteError):
    """A sink could not accept a formatted log line."""

    def __init__(self, sink: str, reason: str, *, code: str = "WRITE_FAILED") -> None:
        super().__init__(
            f"write to {sink} failed: {reason}",
            code=code,
            details={"sink": sink, "reason": reason},
        )


class RotationFailed(WriteFailed):
    """Renaming the active log file or creating its replacement failed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"rotation failed: {reason}", code="ROTATION_FAILED")


class LogPanic(SinkrouteError):
    """Raised by ``Logger.panic`` once the event has reached every hook."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PANIC")


def report_failure(message: str) -> None:
    """Write a diagnostic line to stderr. Never raises."""
    try:
        sys.stderr.write(f"sinkroute: {message}\n")
        sys.stderr.flush()
    except (OSError, ValueError):
        pass
