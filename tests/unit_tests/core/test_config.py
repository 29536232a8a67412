from __future__ import annotations

import pytest
from pydantic import ValidationError

from sinkroute.config import LoggingSettings, RotationPolicy


class TestRotationPolicy:
    def test_defaults(self) -> None:
        policy = RotationPolicy()
        assert (policy.max_size_mb, policy.max_backups, policy.max_age_days) == (10, 10, 7)
        assert policy.max_size_bytes == 10 * 1024 * 1024

    @pytest.mark.parametrize("field", ["max_backups", "max_age_days"])
    def test_negative_limits_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match=field):
            RotationPolicy(**{field: -1})

    def test_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="max_size_mb"):
            RotationPolicy(max_size_mb=0)

    def test_frozen(self) -> None:
        policy = RotationPolicy()
        with pytest.raises(ValidationError):
            policy.max_backups = 1


class TestLoggingSettings:
    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("SINKROUTE_LOG_DEBUG", "true")
        monkeypatch.setenv("SINKROUTE_LOG_MAX_BACKUPS", "3")
        monkeypatch.setenv("SINKROUTE_LOG_FILE_NAME", "ingest")

        settings = LoggingSettings()

        assert settings.debug is True
        assert settings.file_name == "ingest"
        assert settings.rotation_policy() == RotationPolicy(max_backups=3)

    def test_invalid_environment_value(self, monkeypatch) -> None:
        monkeypatch.setenv("SINKROUTE_LOG_MAX_SIZE_MB", "0")
        with pytest.raises(ValidationError):
            LoggingSettings()
