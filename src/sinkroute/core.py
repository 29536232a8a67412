"""
Logger facade and initialization.

The emission pipeline is a structlog bound logger whose processors stamp the
severity, interpolate positional arguments, add a timestamp and the call site,
and finally hand a ``LogEvent`` to every matching hook.
"""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.stdlib import PositionalArgumentsFormatter
from structlog.typing import EventDict, WrappedLogger

from .config import LoggingSettings, RotationPolicy
from .events import Caller, LogEvent
from .exceptions import DirectoryCreationFailed, LogPanic, report_failure
from .formatters import ColorFormatter, FormatterConfig, PlainFormatter
from .levels import Severity
from .rotation import RotatingFileWriter
from .sinks import FileHook, SinkHook, StreamHook

DEFAULT_MINIMUM = Severity.INFO
FALLBACK_PROGRAM_NAME = "output"

# =============================================================================
# Structlog Plumbing
# =============================================================================


class _NopLogger:
    """Wrapped logger that is never reached; the last processor drops every event."""

    def msg(self, *args: Any, **kwargs: Any) -> None:
        pass


class SeverityBoundLogger(structlog.BoundLoggerBase):
    """Bound logger that proxies calls under the severity's method name."""

    def emit(self, level: Severity, event: str, *args: Any) -> Any:
        if args:
            return self._proxy_to_logger(level.short_name, event, positional_args=args)
        return self._proxy_to_logger(level.short_name, event)


INTERPOLATION_ERRORS = (TypeError, ValueError, KeyError)


def interpolate(message: str, args: tuple[Any, ...]) -> str:
    """%-format ``message`` with ``args``, falling back to the raw text on mismatch."""
    if not args:
        return message
    values: Any = args[0] if len(args) == 1 and isinstance(args[0], dict) and args[0] else args
    try:
        return message % values
    except INTERPOLATION_ERRORS as exc:
        return _interpolation_fallback(message, args, exc)


def _interpolation_fallback(message: Any, args: Any, exc: Exception) -> str:
    report_failure(f"bad arguments for log message {message!r}: {exc}")
    return f"{message} {args!r}"


class SafePositionalArgumentsFormatter(PositionalArgumentsFormatter):
    """Positional formatting that never raises into the logging call site."""

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        try:
            return super().__call__(logger, method_name, event_dict)
        except INTERPOLATION_ERRORS as exc:
            args = event_dict.pop("positional_args", ())
            event_dict["event"] = _interpolation_fallback(event_dict.get("event"), args, exc)
            return event_dict


def terminate(status: int) -> None:
    """Exit the whole process with ``status``, also when called from a worker thread."""
    if threading.current_thread() is threading.main_thread():
        sys.exit(status)
    os._exit(status)


def add_severity(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Attach the ``Severity`` matching the emitting method."""
    event_dict["severity"] = Severity.parse(method_name)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add a local, timezone-aware timestamp."""
    event_dict["timestamp"] = datetime.now().astimezone()
    return event_dict


def to_log_event(event_dict: EventDict) -> LogEvent:
    pathname = event_dict.get("pathname")
    lineno = event_dict.get("lineno")
    caller = Caller(pathname, lineno) if pathname and lineno is not None else None
    return LogEvent(
        timestamp=event_dict["timestamp"],
        level=event_dict["severity"],
        message=str(event_dict.get("event", "")),
        caller=caller,
    )


# =============================================================================
# Logger Facade
# =============================================================================


class Logger:
    """Routes events to hooks by level.

    An explicitly constructed handle: build one at startup (see
    ``init_logging``), pass it to the code that logs, close it at shutdown.

    Args:
        hooks: Hooks in dispatch order.
        minimum: Events below this severity are discarded before dispatch.
        exit_func: Called with status 1 after a ``fatal`` event (default: ``terminate``).
    """

    def __init__(
        self,
        hooks: Iterable[SinkHook] = (),
        *,
        minimum: Severity = DEFAULT_MINIMUM,
        exit_func: Callable[[int], Any] = terminate,
    ):
        self._hooks: list[SinkHook] = list(hooks)
        self.minimum = minimum
        self._exit = exit_func
        self._bound = SeverityBoundLogger(
            _NopLogger(),
            processors=[
                add_severity,
                SafePositionalArgumentsFormatter(),
                add_timestamp,
                CallsiteParameterAdder(
                    [CallsiteParameter.PATHNAME, CallsiteParameter.LINENO],
                    additional_ignores=[__name__],
                ),
                self._render_to_hooks,
            ],
            context={},
        )

    @property
    def hooks(self) -> tuple[SinkHook, ...]:
        return tuple(self._hooks)

    def add_hook(self, hook: SinkHook) -> None:
        self._hooks.append(hook)

    def enabled_for(self, level: Severity) -> bool:
        return level >= self.minimum

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, event: LogEvent) -> None:
        """Fire every hook that accepts ``event.level``, in install order.

        A failing hook is reported on stderr and does not stop the others.
        """
        if not self.enabled_for(event.level):
            return
        for hook in self._hooks:
            if not hook.accepts(event.level):
                continue
            try:
                hook.fire(event)
            except Exception as exc:
                report_failure(f"dropped {event.level.short_name} event: {exc}")

    def _render_to_hooks(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        self.dispatch(to_log_event(event_dict))
        raise structlog.DropEvent

    # -------------------------------------------------------------------------
    # Emission API
    # -------------------------------------------------------------------------

    def log(self, level: Severity, message: str, *args: Any) -> None:
        """Emit at ``level``. No control-flow side effects, even for FATAL/PANIC."""
        if self.enabled_for(level):
            self._bound.emit(level, message, *args)

    def trace(self, message: str, *args: Any) -> None:
        self.log(Severity.TRACE, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.log(Severity.DEBUG, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self.log(Severity.INFO, message, *args)

    def warn(self, message: str, *args: Any) -> None:
        self.log(Severity.WARN, message, *args)

    warning = warn

    def error(self, message: str, *args: Any) -> None:
        self.log(Severity.ERROR, message, *args)

    def fatal(self, message: str, *args: Any) -> None:
        """Log, flush and close every hook, then exit with status 1."""
        self.log(Severity.FATAL, message, *args)
        self.close()
        self._exit(1)

    def panic(self, message: str, *args: Any) -> None:
        """Log, then raise ``LogPanic`` with the rendered message."""
        self.log(Severity.PANIC, message, *args)
        raise LogPanic(interpolate(message, args))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def flush(self) -> None:
        for hook in self._hooks:
            try:
                hook.flush()
            except Exception as exc:
                report_failure(f"flush failed: {exc}")

    def close(self) -> None:
        self.flush()
        for hook in self._hooks:
            try:
                hook.close()
            except Exception as exc:
                report_failure(f"close failed: {exc}")

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# =============================================================================
# Initialization
# =============================================================================


@dataclass(frozen=True)
class LevelPlan:
    """Level sets for each sink plus the facade's global minimum."""

    console: frozenset[Severity]
    file: frozenset[Severity]
    minimum: Severity


def build_level_plan(verbose: bool, debug: bool) -> LevelPlan:
    """Decide which levels reach the console and the file. ``debug`` wins over ``verbose``."""
    console = {Severity.PANIC, Severity.FATAL, Severity.ERROR, Severity.WARN}
    file = console | {Severity.INFO}
    minimum = DEFAULT_MINIMUM

    if debug:
        extra = {Severity.INFO, Severity.DEBUG, Severity.TRACE}
        console |= extra
        file |= extra
        minimum = Severity.TRACE
    elif verbose:
        console.add(Severity.INFO)
        minimum = Severity.INFO

    return LevelPlan(console=frozenset(console), file=frozenset(file), minimum=minimum)


def program_name(argv0: Optional[str] = None) -> str:
    """Stem of the running program, or its package directory under ``python -m``."""
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    if not argv0 or argv0 == "-c":
        return FALLBACK_PROGRAM_NAME
    path = Path(argv0)
    if path.stem == "__main__":
        return path.parent.name or FALLBACK_PROGRAM_NAME
    return path.stem or FALLBACK_PROGRAM_NAME


def init_logging(
    verbose: bool,
    debug: bool,
    log_dir: str | Path,
    *,
    settings: Optional[LoggingSettings] = None,
    stream: Any = None,
    exit_func: Callable[[int], Any] = terminate,
) -> Logger:
    """
    Build a logger with a console hook and a rotating file hook.

    Args:
        verbose: Also print info messages to the console.
        debug: Trace level for both sinks with caller annotation. Overrides ``verbose``.
        log_dir: Directory for the log file; created with parents if absent.
        settings: File name and rotation limits; defaults from the environment.
        stream: Console stream (default: stdout).
        exit_func: Passed to the ``Logger``.

    Raises:
        DirectoryCreationFailed: ``log_dir`` could not be created.
    """
    settings = settings or LoggingSettings()
    plan = build_level_plan(verbose, debug)
    formatter_config = FormatterConfig(annotate_caller=debug)

    directory = Path(log_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationFailed(str(directory), str(exc)) from exc

    policy: RotationPolicy = settings.rotation_policy()
    log_file = directory / f"{settings.file_name or program_name()}.log"

    logger = Logger(minimum=plan.minimum, exit_func=exit_func)
    logger.add_hook(StreamHook(plan.console, ColorFormatter(formatter_config), stream))
    logger.add_hook(FileHook(plan.file, PlainFormatter(formatter_config), RotatingFileWriter(log_file, policy)))
    return logger
