"""
Access to the live system hosts file.
Writing it needs administrator (Windows) or root privileges.
"""

from __future__ import annotations
import logging
import os
import sys
from pathlib import Path

from core.errors import AdminRightsRequiredError, StorageError
from core.fileio import read_text_exact, write_text_exact
from core.paths import LIVE_HOSTS_PATH

logger = logging.getLogger(__name__)


class HostsFile:
    def __init__(self, path: Path = LIVE_HOSTS_PATH):
        self.path = Path(path)

    def read(self) -> str:
        try:
            return read_text_exact(self.path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read hosts file: {e}") from e

    def write(self, content: str):
        # Written in place: the file belongs to the OS and keeps its ACLs.
        try:
            write_text_exact(self.path, content)
        except PermissionError as e:
            raise AdminRightsRequiredError(
                f"Failed to write hosts file (admin rights required): {e}"
            ) from e
        except OSError as e:
            raise StorageError(f"Failed to write hosts file: {e}") from e
        logger.info(f"Wrote {len(content)} chars to {self.path}")


def is_elevated() -> bool:
    """True when running as administrator / root."""
    if sys.platform == "win32":
        try:
            import ctypes
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except Exception as e:
            logger.debug(f"Admin check failed: {e}")
            return False
    return hasattr(os, "geteuid") and os.geteuid() == 0
