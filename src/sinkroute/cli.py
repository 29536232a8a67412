"""
Command line entry point: parse the verbosity flags, initialize logging, emit a demo event per level.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from sinkroute.config import LoggingSettings
from sinkroute.core import Logger, init_logging
from sinkroute.exceptions import DirectoryCreationFailed


def build_parser(settings: LoggingSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sinkroute", description="Route leveled log events to console and file.")
    parser.add_argument(
        "-v",
        dest="verbose",
        action="store_true",
        default=settings.verbose,
        help="verbose output. print info messages to stdout",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.debug,
        help="set log level to trace for file and stdout. Overrides -v",
    )
    parser.add_argument("--log-dir", default=settings.directory, help="directory for the log file")
    return parser


def setup(argv: Optional[Sequence[str]] = None, settings: Optional[LoggingSettings] = None) -> Logger:
    settings = settings or LoggingSettings()
    args = build_parser(settings).parse_args(argv)
    try:
        logger = init_logging(args.verbose, args.debug, args.log_dir, settings=settings)
    except DirectoryCreationFailed as exc:
        print("failed to setup logging", exc)
        raise SystemExit(1) from exc
    logger.info("logging initialized")
    return logger


def main(argv: Optional[Sequence[str]] = None) -> int:
    logger = setup(argv)
    logger.trace("trace message")
    logger.debug("debug message")
    logger.info("info message")
    logger.warn("warn message")
    logger.error("error message")
    logger.fatal("fatal message")
    return 0


if __name__ == "__main__":
    sys.exit(main())
