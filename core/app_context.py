"""
Wires the core components together for the GUI and the CLI.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from core.backups import BackupManager
from core.dns import flush_dns
from core.hosts_file import HostsFile
from core.metadata import MetadataStore
from core.paths import LIVE_HOSTS_PATH, StoragePaths, resolve_paths
from core.profile_manager import ProfileManager
from core.settings import AppSettings
from core.switcher import Switcher


@dataclass
class AppContext:
    paths: StoragePaths
    settings: AppSettings
    store: MetadataStore
    hosts_file: HostsFile
    profiles: ProfileManager
    backups: BackupManager
    switcher: Switcher

    @classmethod
    def create(
        cls,
        root: Path | None = None,
        hosts_path: Path = LIVE_HOSTS_PATH,
        flush: Callable[[], None] = flush_dns,
        settings: AppSettings | None = None,
    ) -> "AppContext":
        paths = resolve_paths(root)
        settings = settings or AppSettings(paths.settings_file)
        store = MetadataStore(paths.metadata_file)
        hosts_file = HostsFile(hosts_path)
        profiles = ProfileManager(paths.profiles_dir, store)
        backups = BackupManager(paths.backups_dir, hosts_file, max_backups=settings.max_backups)
        switcher = Switcher(
            profiles,
            backups,
            hosts_file,
            flush=flush,
            flush_after_switch=bool(settings.get("flush_dns_after_switch", True)),
        )
        return cls(paths, settings, store, hosts_file, profiles, backups, switcher)
