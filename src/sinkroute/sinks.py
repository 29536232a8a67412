"""
Sink hooks: a writer, the levels it accepts, and the formatter it renders with.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable

from .events import LogEvent
from .exceptions import WriteFailed
from .formatters import Formatter
from .levels import Severity
from .rotation import RotatingFileWriter

# =============================================================================
# Hook Abstraction
# =============================================================================


class SinkHook(ABC):
    """Base class for the console and file hooks.

    A hook fires only for events whose level is in its level set. Writes to
    the underlying sink are serialized by a per-hook lock.
    """

    def __init__(self, levels: Iterable[Severity], formatter: Formatter):
        self._levels = frozenset(levels)
        self.formatter = formatter
        self._lock = threading.Lock()

    def levels(self) -> frozenset[Severity]:
        return self._levels

    def accepts(self, level: Severity) -> bool:
        return level in self._levels

    def fire(self, event: LogEvent) -> None:
        """Format ``event`` and write it. Raises ``WriteFailed`` on sink errors."""
        line = self.formatter.format(event)
        with self._lock:
            self._write(line)

    def flush(self) -> None:
        with self._lock:
            self._flush()

    @abstractmethod
    def _write(self, line: bytes) -> None: ...

    @abstractmethod
    def _flush(self) -> None: ...

    @abstractmethod
    def close(self) -> None:
        """Release the sink. Safe to call more than once."""
        ...


# =============================================================================
# Concrete Hooks
# =============================================================================


class StreamHook(SinkHook):
    """Console hook writing to a text or binary stream (stdout by default)."""

    def __init__(self, levels: Iterable[Severity], formatter: Formatter, stream: Any = None):
        super().__init__(levels, formatter)
        self._stream = stream or sys.stdout

    @property
    def name(self) -> str:
        return getattr(self._stream, "name", "console")

    def _write(self, line: bytes) -> None:
        try:
            buffer = getattr(self._stream, "buffer", None)
            if buffer is not None:
                self._stream.flush()
                buffer.write(line)
                buffer.flush()
            else:
                encoding = getattr(self._stream, "encoding", None) or self.formatter.ENCODING
                self._stream.write(line.decode(encoding, errors="replace"))
                self._stream.flush()
        except (OSError, ValueError) as exc:
            raise WriteFailed(str(self.name), str(exc)) from exc

    def _flush(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise WriteFailed(str(self.name), str(exc)) from exc

    def close(self) -> None:
        # The console stream belongs to the process, not to the hook.
        pass


class FileHook(SinkHook):
    """File hook backed by a rotating writer."""

    def __init__(self, levels: Iterable[Severity], formatter: Formatter, writer: RotatingFileWriter):
        super().__init__(levels, formatter)
        self.writer = writer

    @property
    def name(self) -> str:
        return str(self.writer.path)

    def _write(self, line: bytes) -> None:
        self.writer.write(line)

    def _flush(self) -> None:
        try:
            self.writer.flush()
        except OSError as exc:
            raise WriteFailed(self.name, str(exc)) from exc

    def close(self) -> None:
        with self._lock:
            self.writer.close()
