"""
Metadata Store
Loads and saves the record of known profiles and the active one.

metadata.json is the single source of truth for which profiles exist:
  {
    "active": "work",
    "profiles": ["work", "home"]
  }
Every save rewrites the whole file. There is no locking; the last writer wins.
"""

from __future__ import annotations
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Iterator

from core.errors import MetadataParseError, StorageError
from core.fileio import write_text_atomic

logger = logging.getLogger(__name__)


@dataclass
class Metadata:
    active: str = ""
    profiles: list[str] = field(default_factory=list)

    def has(self, name: str) -> bool:
        return name in self.profiles

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> "Metadata":
        if not isinstance(data, dict):
            raise MetadataParseError("Failed to parse metadata: expected a JSON object")
        active = data.get("active", "")
        profiles = data.get("profiles", [])
        if not isinstance(active, str):
            raise MetadataParseError("Failed to parse metadata: 'active' must be a string")
        if not isinstance(profiles, list) or not all(isinstance(p, str) for p in profiles):
            raise MetadataParseError("Failed to parse metadata: 'profiles' must be a list of strings")
        if len(set(profiles)) != len(profiles):
            raise MetadataParseError("Failed to parse metadata: duplicate profile names")
        if active and active not in profiles:
            raise MetadataParseError(f"Failed to parse metadata: active profile '{active}' is not listed")
        return cls(active=active, profiles=list(profiles))


class MetadataStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Metadata:
        """Read the record, creating and persisting the default one if missing."""
        if not self.path.exists():
            metadata = Metadata()
            self.save(metadata)
            logger.info(f"Initialized metadata at {self.path}")
            return metadata
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read metadata: {e}") from e
        except UnicodeDecodeError as e:
            raise MetadataParseError(f"Failed to parse metadata: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MetadataParseError(f"Failed to parse metadata: {e}") from e
        return Metadata.from_dict(data)

    def save(self, metadata: Metadata):
        try:
            write_text_atomic(self.path, json.dumps(metadata.to_dict(), indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write metadata: {e}") from e

    @contextmanager
    def update(self) -> Iterator[Metadata]:
        """One load-modify-save cycle. Nothing is saved if the block raises."""
        metadata = self.load()
        yield metadata
        self.save(metadata)
