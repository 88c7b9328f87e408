"""
Profile Manager
Handles creation, deletion, renaming, listing, and content of hosts profiles.

Profile storage layout:
  <data>/profiles/
    metadata.json       ← which profiles exist and which one is active
    <profile_name>.hosts

Existence is decided by metadata.json only; .hosts files are never enumerated.
Every change that adds or removes a profile writes the file first and the
metadata second, so a crash in between leaves at worst an orphan file.
"""

from __future__ import annotations
import logging
from pathlib import Path

from core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from core.fileio import read_text_exact, write_text_atomic
from core.metadata import MetadataStore

logger = logging.getLogger(__name__)

PROFILE_EXTENSION = ".hosts"
NEW_PROFILE_CONTENT = "# New profile\n"

# Characters that are unsafe in file names on at least one platform
INVALID_NAME_CHARS = set('\\/:*?"<>|')


def validate_name(name: str) -> str:
    """Return the stripped name, or raise ValidationError."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Profile name cannot be empty")
    if name in (".", ".."):
        raise ValidationError(f"'{name}' is not a valid profile name")
    bad = sorted({c for c in name if c in INVALID_NAME_CHARS or ord(c) < 32})
    if bad:
        shown = " ".join(repr(c)[1:-1] for c in bad)
        raise ValidationError(f"Profile name contains invalid characters: {shown}")
    return name


class ProfileManager:
    """Manages hosts profiles stored on disk under a profiles directory."""

    def __init__(self, profiles_dir: Path, store: MetadataStore):
        self.profiles_dir = Path(profiles_dir)
        self.profiles_dir.mkdir(parents=True, exist_ok=True)
        self.store = store

    def list_profiles(self) -> list[str]:
        return list(self.store.load().profiles)

    def get_active(self) -> str:
        return self.store.load().active

    def exists(self, name: str) -> bool:
        return self.store.load().has(name)

    def create_profile(self, name: str, content: str = NEW_PROFILE_CONTENT) -> str:
        """
        Create a profile seeded with `content`. Surrounding whitespace is
        stripped from the name; returns the name as stored.
        """
        name = validate_name(name)
        metadata = self.store.load()
        if metadata.has(name):
            raise ConflictError(f"Profile '{name}' already exists")

        self._write_file(name, content, action="create")
        metadata.profiles.append(name)
        self.store.save(metadata)
        logger.info(f"Created profile: {name}")
        return name

    def duplicate_profile(self, src_name: str, new_name: str) -> str:
        content = self.read_profile(src_name)
        return self.create_profile(new_name, content)

    def delete_profile(self, name: str):
        metadata = self.store.load()
        if not metadata.has(name):
            raise NotFoundError(f"Profile '{name}' does not exist")
        if metadata.active == name:
            raise ConflictError(f"Cannot delete active profile '{name}'")

        path = self.profile_path(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete profile '{name}': {e}") from e

        metadata.profiles = [p for p in metadata.profiles if p != name]
        self.store.save(metadata)
        logger.info(f"Deleted profile: {name}")

    def rename_profile(self, old_name: str, new_name: str) -> str:
        new_name = validate_name(new_name)
        metadata = self.store.load()
        if not metadata.has(old_name):
            raise NotFoundError(f"Profile '{old_name}' does not exist")
        if metadata.has(new_name):
            raise ConflictError(f"A profile named '{new_name}' already exists")

        old_path = self.profile_path(old_name)
        new_path = self.profile_path(new_name)
        try:
            old_path.rename(new_path)
        except OSError as e:
            raise StorageError(f"Failed to rename profile '{old_name}': {e}") from e

        metadata.profiles = [new_name if p == old_name else p for p in metadata.profiles]
        if metadata.active == old_name:
            metadata.active = new_name
        self.store.save(metadata)
        logger.info(f"Renamed profile: {old_name} → {new_name}")
        return new_name

    def read_profile(self, name: str) -> str:
        path = self.profile_path(name)
        try:
            return read_text_exact(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"Profile '{name}' has no content file") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read profile '{name}': {e}") from e

    def write_profile(self, name: str, content: str):
        if not self.exists(name):
            raise NotFoundError(f"Profile '{name}' does not exist")
        self._write_file(name, content, action="write")
        logger.debug(f"Saved profile content: {name} ({len(content)} chars)")

    def set_active(self, name: str):
        """Point the active marker at `name` (used by the switcher)."""
        with self.store.update() as metadata:
            if not metadata.has(name):
                raise NotFoundError(f"Profile '{name}' does not exist")
            metadata.active = name
        logger.info(f"Active profile: {name}")

    def profile_path(self, name: str) -> Path:
        return self.profiles_dir / f"{name}{PROFILE_EXTENSION}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write_file(self, name: str, content: str, action: str):
        try:
            write_text_atomic(self.profile_path(name), content)
        except OSError as e:
            raise StorageError(f"Failed to {action} profile '{name}': {e}") from e
