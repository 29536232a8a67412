"""
Interceptors for capturing standard library and third-party logs.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .core import Logger
from .events import Caller, LogEvent
from .levels import Severity


class StdlibBridgeHandler(logging.Handler):
    """
    Redirect standard library logging records into a sinkroute ``Logger``.

    Records go straight to ``Logger.dispatch``, so a CRITICAL record is routed
    like FATAL but never terminates the process.
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET):
        super().__init__(level)
        self.logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = LogEvent(
                timestamp=datetime.fromtimestamp(record.created).astimezone(),
                level=Severity.from_stdlib(record.levelno),
                message=self.format(record),
                caller=Caller(record.pathname, record.lineno) if record.pathname else None,
            )
            self.logger.dispatch(event)
        except Exception:
            self.handleError(record)


def intercept_stdlib(logger: Logger, level: int = logging.NOTSET) -> StdlibBridgeHandler:
    """Replace the root logger's handlers with a bridge into ``logger``."""
    handler = StdlibBridgeHandler(logger)
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
