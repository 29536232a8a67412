from __future__ import annotations

import logging

from conftest import RecordingHook
from sinkroute.core import Logger
from sinkroute.interceptors import StdlibBridgeHandler, intercept_stdlib
from sinkroute.levels import ALL_LEVELS, Severity


class TestStdlibBridge:
    def test_records_are_routed_with_mapped_level(self, restore_root_logger) -> None:
        hook = RecordingHook("all", ALL_LEVELS)
        intercept_stdlib(Logger([hook]))

        logging.getLogger("vendor.client").warning("retrying %s", "upload")

        (event,) = hook.events
        assert event.level is Severity.WARN
        assert event.message == "retrying upload"
        assert event.caller is not None and event.caller.file.endswith("test_interceptors.py")

    def test_critical_is_routed_as_fatal_without_exiting(self, restore_root_logger) -> None:
        hook = RecordingHook("all", ALL_LEVELS)
        exits: list[int] = []
        intercept_stdlib(Logger([hook], exit_func=exits.append))

        logging.getLogger("vendor").critical("meltdown")

        assert [e.level for e in hook.events] == [Severity.FATAL]
        assert exits == []

    def test_global_minimum_still_applies(self, restore_root_logger) -> None:
        hook = RecordingHook("all", ALL_LEVELS)
        intercept_stdlib(Logger([hook], minimum=Severity.INFO))

        logging.getLogger("vendor").debug("noise")

        assert hook.events == []

    def test_replaces_existing_root_handlers(self, restore_root_logger) -> None:
        restore_root_logger.addHandler(logging.NullHandler())
        handler = intercept_stdlib(Logger())
        assert restore_root_logger.handlers == [handler]
        assert isinstance(handler, StdlibBridgeHandler)
