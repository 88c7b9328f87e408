"""
Error types raised by the core.
Every error carries a human-readable message that the GUI and CLI show verbatim.
"""

from __future__ import annotations


class HostsPilotError(Exception):
    """Base class for all HostsPilot failures."""


class ValidationError(HostsPilotError, ValueError):
    """Empty or otherwise unusable profile name."""


class ConflictError(HostsPilotError, ValueError):
    """Duplicate profile name, or an operation not allowed on the active profile."""


class NotFoundError(HostsPilotError, LookupError):
    """Unknown profile or backup."""


class MetadataParseError(HostsPilotError, ValueError):
    """metadata.json exists but is not a valid record."""


class StorageError(HostsPilotError, OSError):
    """Any filesystem read/write/create/delete/rename failure."""


class AdminRightsRequiredError(StorageError, PermissionError):
    """The live hosts file could not be written without elevated privileges."""


class StorageRootError(HostsPilotError, OSError):
    """No application data directory could be determined."""


class CacheFlushError(HostsPilotError):
    """The DNS cache flush command could not be run or exited non-zero."""
