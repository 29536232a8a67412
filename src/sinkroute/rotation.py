"""
Size-based rotating log file writer.

The active file is renamed to ``<stem>-<UTC timestamp><suffix>`` once the next
write would push it past the size limit. Old backups are pruned by count and
by age when the file is first opened and after every rotation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from .config import RotationPolicy
from .exceptions import RotationFailed, WriteFailed, report_failure

Clock = Callable[[], datetime]

BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S.%f"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Backup:
    """A rotated log file and the moment it was rotated."""

    path: Path
    rotated_at: datetime
    sequence: int = 0


class RotatingFileWriter:
    """Append-only byte writer that rotates its file by size.

    Args:
        path: Active log file.
        policy: Size, count and age limits.
        clock: Returns the current aware datetime; used for backup names and
            age pruning.
    """

    def __init__(self, path: str | Path, policy: RotationPolicy | None = None, *, clock: Clock | None = None):
        self.path = Path(path)
        self.policy = policy or RotationPolicy()
        self._clock = clock or _utcnow
        self._file: Optional[BinaryIO] = None
        self._size = 0
        self._backup_re = re.compile(
            rf"^{re.escape(self.path.stem)}-"
            r"(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}\.\d{3})"
            r"(?:\.(\d+))?"
            rf"{re.escape(self.path.suffix)}$"
        )

    @property
    def size(self) -> int:
        return self._size

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def write(self, data: bytes) -> int:
        length = len(data)
        limit = self.policy.max_size_bytes
        if length > limit:
            raise WriteFailed(str(self.path), f"write length {length} exceeds maximum file size {limit}")

        if self._file is None:
            self._open_existing_or_new(length)
        elif self._size + length > limit:
            self.rotate()

        file = self._file
        if file is None:
            raise WriteFailed(str(self.path), "log file is not open")
        try:
            written = file.write(data)
            file.flush()
        except OSError as exc:
            raise WriteFailed(str(self.path), str(exc)) from exc
        self._size += written
        return written

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> RotatingFileWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Rotation
    # -------------------------------------------------------------------------

    def rotate(self) -> None:
        """Close the active file, move it aside, start a fresh one, then prune."""
        self.close()
        self._open_new()
        self._prune()

    def _open_existing_or_new(self, length: int) -> None:
        try:
            current = self.path.stat().st_size
        except FileNotFoundError:
            self._open_new()
            self._prune()
            return
        except OSError as exc:
            raise WriteFailed(str(self.path), str(exc)) from exc

        if current + length > self.policy.max_size_bytes:
            self.rotate()
            return

        try:
            self._file = open(self.path, "ab")
        except OSError:
            # Unreadable or locked file: start over with a fresh one.
            self.rotate()
            return
        self._size = current
        self._prune()

    def _open_new(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.exists():
                self.path.rename(self._backup_path())
            self._file = open(self.path, "wb")
        except OSError as exc:
            raise RotationFailed(str(self.path), str(exc)) from exc
        self._size = 0

    def _backup_path(self) -> Path:
        stamp = self._clock().astimezone(timezone.utc).strftime(BACKUP_TIME_FORMAT)[:-3]
        stem, suffix = self.path.stem, self.path.suffix
        candidate = self.path.with_name(f"{stem}-{stamp}{suffix}")
        sequence = 0
        while candidate.exists():
            sequence += 1
            candidate = self.path.with_name(f"{stem}-{stamp}.{sequence}{suffix}")
        return candidate

    # -------------------------------------------------------------------------
    # Retention
    # -------------------------------------------------------------------------

    def backups(self) -> list[Backup]:
        """Rotated files next to the active one, newest first."""
        found: list[Backup] = []
        directory = self.path.parent
        if not directory.is_dir():
            return found
        for entry in directory.iterdir():
            match = self._backup_re.match(entry.name)
            if not match or not entry.is_file():
                continue
            rotated_at = datetime.strptime(match.group(1), BACKUP_TIME_FORMAT).replace(tzinfo=timezone.utc)
            found.append(Backup(entry, rotated_at, int(match.group(2) or 0)))
        found.sort(key=lambda b: (b.rotated_at, b.sequence), reverse=True)
        return found

    def _prune(self) -> None:
        max_backups = self.policy.max_backups
        max_age_days = self.policy.max_age_days
        if max_backups == 0 and max_age_days == 0:
            return

        try:
            backups = self.backups()
        except OSError as exc:
            report_failure(f"cannot list backups of {self.path}: {exc}")
            return

        stale: list[Backup] = []
        if max_backups > 0:
            stale.extend(backups[max_backups:])
            backups = backups[:max_backups]
        if max_age_days > 0:
            cutoff = self._clock() - timedelta(days=max_age_days)
            stale.extend(b for b in backups if b.rotated_at < cutoff)

        for backup in stale:
            try:
                backup.path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                report_failure(f"cannot remove old log file {backup.path}: {exc}")
