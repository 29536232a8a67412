"""
Immutable log event shared by every hook.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .levels import Severity


def rfc3339(dt: datetime) -> str:
    """Render ``dt`` as RFC 3339 with second precision (``Z`` for UTC)."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    text = dt.isoformat(timespec="seconds")
    if dt.utcoffset() == timedelta(0):
        return text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True, slots=True)
class Caller:
    """Source location of the logging call."""

    file: str
    line: int

    def short(self) -> str:
        return f"{os.path.basename(self.file)}:{self.line}"


@dataclass(frozen=True, slots=True)
class LogEvent:
    """A single log call, produced once and read by all matching hooks."""

    timestamp: datetime
    level: Severity
    message: str
    caller: Optional[Caller] = None
