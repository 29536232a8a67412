from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Iterable

import pytest

from sinkroute.config import RotationPolicy
from sinkroute.events import Caller, LogEvent
from sinkroute.formatters import Formatter, PlainFormatter
from sinkroute.levels import Severity
from sinkroute.sinks import SinkHook

MEGABYTE = 1024 * 1024


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingHook(SinkHook):
    """Hook that keeps formatted lines in memory and logs its firing order."""

    def __init__(
        self,
        name: str,
        levels: Iterable[Severity],
        journal: list[tuple[str, Severity]] | None = None,
        formatter: Formatter | None = None,
    ):
        super().__init__(levels, formatter or PlainFormatter())
        self.name = name
        self.journal = journal if journal is not None else []
        self.lines: list[bytes] = []
        self.events: list[LogEvent] = []
        self.closed = False

    def fire(self, event: LogEvent) -> None:
        self.events.append(event)
        self.journal.append((self.name, event.level))
        super().fire(event)

    def _write(self, line: bytes) -> None:
        self.lines.append(line)

    def _flush(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 10, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def small_policy() -> RotationPolicy:
    return RotationPolicy(max_size_mb=1, max_backups=3, max_age_days=7)


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    def _make(
        level: Severity = Severity.WARN,
        message: str = "disk nearly full",
        caller: Caller | None = None,
    ) -> LogEvent:
        return LogEvent(
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            level=level,
            message=message,
            caller=caller,
        )

    return _make


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    root_logger.handlers = handlers
    root_logger.setLevel(level)
