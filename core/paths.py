"""
Storage Paths
Resolves where HostsPilot keeps its data.

Layout under the per-user application data directory:
  HostsPilot/
    config.json           ← app settings
    hostspilot.log        ← log file
    profiles/
      metadata.json       ← {"active": ..., "profiles": [...]}
      <name>.hosts        ← one file per profile
    backups/
      hosts_backup_YYYYMMDD_HHMMSS.txt
"""

from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

from core.errors import StorageError, StorageRootError

APP_NAME = "HostsPilot"
HOME_ENV_VAR = "HOSTSPILOT_HOME"

if sys.platform == "win32":
    LIVE_HOSTS_PATH = Path(r"C:\Windows\System32\drivers\etc\hosts")
else:
    LIVE_HOSTS_PATH = Path("/etc/hosts")


@dataclass(frozen=True)
class StoragePaths:
    root: Path

    @property
    def profiles_dir(self) -> Path:
        return self.root / "profiles"

    @property
    def backups_dir(self) -> Path:
        return self.root / "backups"

    @property
    def metadata_file(self) -> Path:
        return self.profiles_dir / "metadata.json"

    @property
    def settings_file(self) -> Path:
        return self.root / "config.json"

    @property
    def log_file(self) -> Path:
        return self.root / "hostspilot.log"

    def ensure_dirs(self) -> "StoragePaths":
        """Create any missing directory. Safe to call repeatedly."""
        for d in (self.root, self.profiles_dir, self.backups_dir):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to create directory {d}: {e}") from e
        return self

    def as_dict(self) -> dict[str, str]:
        return {
            "root": str(self.root),
            "profiles": str(self.profiles_dir),
            "metadata": str(self.metadata_file),
            "backups": str(self.backups_dir),
            "settings": str(self.settings_file),
            "log": str(self.log_file),
            "live_hosts": str(LIVE_HOSTS_PATH),
        }


def data_root() -> Path:
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    try:
        base = user_data_dir(APP_NAME, appauthor=False)
    except Exception as e:
        raise StorageRootError(f"Could not find application data directory: {e}") from e
    if not base:
        raise StorageRootError("Could not find application data directory")
    return Path(base)


def resolve_paths(root: Path | None = None, create: bool = True) -> StoragePaths:
    paths = StoragePaths(Path(root) if root is not None else data_root())
    if create:
        paths.ensure_dirs()
    return paths
