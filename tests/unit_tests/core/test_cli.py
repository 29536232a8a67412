from __future__ import annotations

import pytest

from sinkroute.cli import main, setup
from sinkroute.config import LoggingSettings


class TestCli:
    def test_setup_logs_initialization_to_file(self, tmp_path) -> None:
        logger = setup(["--log-dir", str(tmp_path)], settings=LoggingSettings(file_name="cli"))
        logger.close()
        assert "| Info    | logging initialized" in (tmp_path / "cli.log").read_text(encoding="utf-8")

    def test_debug_flag_overrides_verbose(self, tmp_path, capsys) -> None:
        logger = setup(["-v", "--debug", "--log-dir", str(tmp_path)], settings=LoggingSettings(file_name="cli"))
        logger.trace("deep detail")
        logger.close()
        assert "deep detail" in capsys.readouterr().out

    def test_init_failure_exits_with_message(self, tmp_path, capsys) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(SystemExit) as excinfo:
            setup(["--log-dir", str(blocker / "logs")], settings=LoggingSettings())
        assert excinfo.value.code == 1
        assert "failed to setup logging" in capsys.readouterr().out

    def test_main_ends_with_fatal_exit(self, tmp_path, capsys, monkeypatch) -> None:
        monkeypatch.setenv("SINKROUTE_LOG_FILE_NAME", "demo")
        with pytest.raises(SystemExit) as excinfo:
            main(["--log-dir", str(tmp_path)])
        assert excinfo.value.code == 1

        out = capsys.readouterr().out
        assert "fatal message" in out
        assert "info message" not in out
        file_text = (tmp_path / "demo.log").read_text(encoding="utf-8")
        assert "info message" in file_text
        assert file_text.rstrip().endswith("| Fatal   | fatal message")
