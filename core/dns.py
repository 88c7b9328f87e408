"""
DNS cache flush after the hosts file changes.
Only Windows and macOS have a cache worth flushing; elsewhere this is a no-op.
"""

from __future__ import annotations
import logging
import subprocess
import sys
from typing import Callable

from core.errors import CacheFlushError

logger = logging.getLogger(__name__)

FLUSH_COMMANDS = {
    "win32": ["ipconfig", "/flushdns"],
    "darwin": ["dscacheutil", "-flushcache"],
}


def flush_command(platform: str = sys.platform) -> list[str] | None:
    return FLUSH_COMMANDS.get(platform)


def flush_dns(runner: Callable = subprocess.run, platform: str = sys.platform):
    cmd = flush_command(platform)
    if cmd is None:
        logger.debug(f"No DNS flush needed on {platform}")
        return
    try:
        proc = runner(cmd, capture_output=True, text=True, errors="replace")
    except OSError as e:
        raise CacheFlushError(f"Failed to flush DNS: {e}") from e
    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip()
        msg = f"DNS flush command failed (exit {proc.returncode})"
        raise CacheFlushError(f"{msg}: {detail}" if detail else msg)
    logger.info("DNS cache flushed")
