"""
Log formatters and color utilities.

Both formatters render ``timestamp | level | [caller |] message``. The caller
column exists only when the formatter is built with ``annotate_caller=True``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .events import LogEvent, rfc3339
from .levels import RESET, color_for

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class FormatterConfig:
    """Rendering options fixed at construction time."""

    annotate_caller: bool = False


# =============================================================================
# Formatters
# =============================================================================


class Formatter(ABC):
    """Turns an event into the bytes written to a sink."""

    SEPARATOR = " | "
    CALLER_WIDTH = 16
    ENCODING = "utf-8"

    def __init__(self, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()

    @property
    def annotate_caller(self) -> bool:
        return self.config.annotate_caller

    @classmethod
    def _caller_column(cls, event: LogEvent) -> str:
        caller = event.caller.short() if event.caller else ""
        return f"{caller:>{cls.CALLER_WIDTH}}"

    def _columns(self, event: LogEvent, level_text: str) -> list[str]:
        columns = [rfc3339(event.timestamp), level_text]
        if self.annotate_caller:
            columns.append(self._caller_column(event))
        columns.append(event.message)
        return columns

    def format(self, event: LogEvent) -> bytes:
        return (self.render(event) + "\n").encode(self.ENCODING, errors="replace")

    @abstractmethod
    def render(self, event: LogEvent) -> str:
        """Render the line without its trailing newline."""
        ...


class PlainFormatter(Formatter):
    """Uncolored text, used for log files."""

    def render(self, event: LogEvent) -> str:
        return self.SEPARATOR.join(self._columns(event, event.level.label))


class ColorFormatter(Formatter):
    """ANSI-colored text for an interactive terminal.

    Without caller annotation only the level column is colored. With caller
    annotation the whole line takes the level's color.
    """

    def render(self, event: LogEvent) -> str:
        color = color_for(event.level)
        if self.annotate_caller:
            line = self.SEPARATOR.join(self._columns(event, event.level.label))
            return f"{color}{line}{RESET}"
        level_text = f"{color}{event.level.label}{RESET}"
        return self.SEPARATOR.join(self._columns(event, level_text))
