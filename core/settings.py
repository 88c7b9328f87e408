"""
App-level settings persisted to config.json in the data directory.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path

from core.backups import DEFAULT_MAX_BACKUPS
from core.errors import StorageError
from core.fileio import write_text_atomic

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "max_backups": DEFAULT_MAX_BACKUPS,
    "flush_dns_after_switch": True,
    "confirm_before_activate": True,
    "confirm_before_delete": True,
    "log_level": "INFO",
    "window_geometry": "",
    "last_profile": "",
}


class AppSettings:
    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self._data: dict = dict(DEFAULT_SETTINGS)
        self.load()

    def load(self):
        if self.config_path.exists():
            try:
                loaded = json.loads(self.config_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable settings file {self.config_path}: {e}")
                return
            if isinstance(loaded, dict):
                self._data.update(loaded)
            else:
                logger.warning(f"Ignoring settings file {self.config_path}: not a JSON object")

    def save(self):
        try:
            write_text_atomic(self.config_path, json.dumps(self._data, indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write settings: {e}") from e

    def get(self, key: str, default=None):
        return self._data.get(key, default)

    def set(self, key: str, value):
        self._data[key] = value
        self.save()

    @property
    def max_backups(self) -> int:
        try:
            return max(1, int(self.get("max_backups", DEFAULT_MAX_BACKUPS)))
        except (TypeError, ValueError):
            return DEFAULT_MAX_BACKUPS

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self.set(key, value)
