"""
Logging Configuration.

Values are read from ``SINKROUTE_LOG_*`` environment variables or a ``.env``
file. Rotation parameters are fixed per deployment.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BYTES_PER_MEGABYTE = 1024 * 1024


class RotationPolicy(BaseModel):
    """Size, count and age limits for the rotating log file.

    ``max_backups=0`` keeps every backup by count and ``max_age_days=0``
    disables age-based removal.
    """

    model_config = ConfigDict(frozen=True)

    max_size_mb: int = Field(default=10, gt=0, description="Rotate once the file would exceed this size")
    max_backups: int = Field(default=10, ge=0, description="Rotated files to keep")
    max_age_days: int = Field(default=7, ge=0, description="Delete rotated files older than this")

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * BYTES_PER_MEGABYTE


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SINKROUTE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    verbose: bool = Field(default=False, description="Print info messages to the console")
    debug: bool = Field(default=False, description="Trace level everywhere with caller annotation; overrides verbose")
    directory: str = Field(default="./logs/", description="Directory holding the log file")
    file_name: Optional[str] = Field(default=None, description="Log file stem; defaults to the program name")
    max_size_mb: int = Field(default=10, gt=0, description="Rotation size threshold in megabytes")
    max_backups: int = Field(default=10, ge=0, description="Rotated files to keep")
    max_age_days: int = Field(default=7, ge=0, description="Retention of rotated files in days")

    def rotation_policy(self) -> RotationPolicy:
        return RotationPolicy(
            max_size_mb=self.max_size_mb,
            max_backups=self.max_backups,
            max_age_days=self.max_age_days,
        )
