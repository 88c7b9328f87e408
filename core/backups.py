"""
Backup Manager
Timestamped snapshots of the live hosts file, taken before every change to it.

Backups live flat in one directory:
  <data>/backups/
    hosts_backup_20260101_120000.txt
    hosts_backup_20260101_120000_002.txt   ← second capture within the same second
    ...
Only files with the backup extension are treated as backups. At most
`max_backups` are kept; the oldest by modification time are removed first.
"""

from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from core.errors import NotFoundError, StorageError
from core.fileio import read_text_exact, write_text_atomic
from core.hosts_file import HostsFile

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "hosts_backup"
BACKUP_EXTENSION = ".txt"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
DEFAULT_MAX_BACKUPS = 25


def backup_name(when: datetime, serial: int = 1) -> str:
    stamp = when.strftime(TIMESTAMP_FORMAT)
    suffix = f"_{serial:03d}" if serial > 1 else ""
    return f"{BACKUP_PREFIX}_{stamp}{suffix}{BACKUP_EXTENSION}"


def select_evictions(entries: Iterable[tuple[str, float]], max_keep: int) -> list[str]:
    """
    Given (identifier, mtime) pairs, return the identifiers to delete so that
    at most `max_keep` remain. Oldest mtime goes first; equal mtimes fall back
    to the identifier, which sorts chronologically for generated names.
    """
    max_keep = max(1, max_keep)
    ordered = sorted(entries, key=lambda e: (e[1], e[0]))
    excess = len(ordered) - max_keep
    if excess <= 0:
        return []
    return [ident for ident, _ in ordered[:excess]]


class BackupManager:
    def __init__(
        self,
        backups_dir: Path,
        hosts_file: HostsFile,
        max_backups: int = DEFAULT_MAX_BACKUPS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.backups_dir = Path(backups_dir)
        self.hosts_file = hosts_file
        self.max_backups = max_backups
        self.clock = clock

    # ------------------------------------------------------------------
    # Capture / retention
    # ------------------------------------------------------------------

    def capture(self) -> Path:
        """Snapshot the live hosts file. Returns the path of the new backup."""
        content = self.hosts_file.read()
        try:
            self.backups_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create backups directory: {e}") from e

        path = self._next_free_path(self.clock())
        try:
            write_text_atomic(path, content)
        except OSError as e:
            raise StorageError(f"Failed to write backup: {e}") from e
        logger.info(f"Captured backup {path.name}")

        self.enforce_retention()
        return path

    def enforce_retention(self) -> list[str]:
        """Delete the oldest backups beyond the limit. Returns deleted names."""
        entries = []
        for path in self._entries():
            try:
                entries.append((path.name, path.stat().st_mtime))
            except OSError as e:
                raise StorageError(f"Failed to read backups directory: {e}") from e

        doomed = select_evictions(entries, self.max_backups)
        for name in doomed:
            try:
                (self.backups_dir / name).unlink()
            except OSError as e:
                raise StorageError(f"Failed to delete old backup {name}: {e}") from e
            logger.warning(f"Evicted old backup {name} (limit {self.max_backups})")
        return doomed

    # ------------------------------------------------------------------
    # Browse / delete
    # ------------------------------------------------------------------

    def list_backups(self) -> list[str]:
        """Backup names, newest first."""
        return sorted((p.name for p in self._entries()), reverse=True)

    def read_backup(self, backup_id: str) -> str:
        path = self._existing(backup_id)
        try:
            return read_text_exact(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read backup: {e}") from e

    def delete_backup(self, backup_id: str):
        path = self._existing(backup_id)
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete backup: {e}") from e
        logger.info(f"Deleted backup {backup_id}")

    def delete_all_backups(self) -> int:
        removed = 0
        for path in self._entries():
            try:
                path.unlink()
            except OSError as e:
                raise StorageError(f"Failed to delete backup {path.name}: {e}") from e
            removed += 1
        if removed:
            logger.info(f"Deleted all backups ({removed})")
        return removed

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    def restore(self, backup_id: str) -> Path:
        """
        Overwrite the live hosts file with a backup.
        The current live state is captured first, so a restore never loses
        anything. Returns the path of that safety capture.
        """
        source = self._existing(backup_id)
        safety = self.capture()
        try:
            content = read_text_exact(source)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read backup: {e}") from e
        self.hosts_file.write(content)
        logger.info(f"Restored hosts file from {backup_id}")
        return safety

    def backup_path(self, backup_id: str) -> Path:
        return self.backups_dir / backup_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _entries(self) -> list[Path]:
        if not self.backups_dir.is_dir():
            return []
        try:
            return [
                p for p in self.backups_dir.iterdir()
                if p.is_file() and p.suffix == BACKUP_EXTENSION
            ]
        except OSError as e:
            raise StorageError(f"Failed to read backups directory: {e}") from e

    def _existing(self, backup_id: str) -> Path:
        # Identifiers are bare file names inside the backups directory
        if not backup_id or Path(backup_id).name != backup_id:
            raise NotFoundError(f"Backup '{backup_id}' does not exist")
        path = self.backup_path(backup_id)
        if not path.is_file():
            raise NotFoundError(f"Backup '{backup_id}' does not exist")
        return path

    def _next_free_path(self, when: datetime) -> Path:
        serial = 1
        path = self.backups_dir / backup_name(when, serial)
        while path.exists():
            serial += 1
            path = self.backups_dir / backup_name(when, serial)
        return path
