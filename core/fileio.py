"""
Text file helpers.
Content is read and written without newline translation so hosts files keep
their line endings byte for byte.
"""

from __future__ import annotations
import os
import tempfile
from pathlib import Path


def read_text_exact(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_text_exact(path: Path, text: str):
    """Overwrite in place (keeps the file's identity and permissions)."""
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def write_text_atomic(path: Path, text: str):
    """Temp file in the target directory, fsync, then os.replace."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)
