"""
Switcher
Makes a profile live.

activate() runs a fixed pipeline; each stage starts only after the previous
one succeeded:
  CAPTURING          back up the current live hosts file
  WRITING            overwrite the live file with the profile's content
  METADATA_UPDATING  point the active marker at the profile
  FLUSHING           flush the DNS cache (best effort)

Nothing is rolled back. A failure while writing leaves the fresh backup in
place and the active marker untouched. A failed DNS flush is reported as a
warning; the switch itself stays in effect.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from core.backups import BackupManager
from core.dns import flush_dns
from core.errors import CacheFlushError, NotFoundError
from core.hosts_file import HostsFile
from core.profile_manager import ProfileManager

logger = logging.getLogger(__name__)


class SwitchStage(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    WRITING = "writing"
    METADATA_UPDATING = "metadata_updating"
    FLUSHING = "flushing"


@dataclass
class OperationResult:
    success: bool
    profile: str = ""
    backup_path: Path | None = None
    stage_reached: SwitchStage = SwitchStage.IDLE
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        parts = []
        if self.profile:
            parts.append(f"'{self.profile}' is live")
        if self.backup_path:
            parts.append(f"backup {self.backup_path.name}")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning(s)")
        return ", ".join(parts) or ("done" if self.success else "failed")


@dataclass
class _Activation:
    name: str
    result: OperationResult
    content: str = ""


class Switcher:
    """Coordinates activation and restore across profiles, backups and the live file."""

    def __init__(
        self,
        profiles: ProfileManager,
        backups: BackupManager,
        hosts_file: HostsFile,
        flush: Callable[[], None] = flush_dns,
        flush_after_switch: bool = True,
    ):
        self.pm = profiles
        self.backups = backups
        self.hosts_file = hosts_file
        self.flush = flush
        self.flush_after_switch = flush_after_switch
        self.last_stage = SwitchStage.IDLE

    # ------------------------------------------------------------------ #
    # Activation                                                           #
    # ------------------------------------------------------------------ #

    def activate(self, name: str) -> OperationResult:
        if not self.pm.exists(name):
            raise NotFoundError(f"Profile '{name}' does not exist")

        job = _Activation(name=name, result=OperationResult(success=False, profile=name))
        pipeline = [
            (SwitchStage.CAPTURING, self._capture),
            (SwitchStage.WRITING, self._write_live),
            (SwitchStage.METADATA_UPDATING, self._mark_active),
        ]
        for stage, step in pipeline:
            self._enter(stage, job.result)
            try:
                step(job)
            except Exception as e:
                logger.error(f"Activating '{name}' failed while {stage.value}: {e}")
                self.last_stage = SwitchStage.IDLE
                raise

        job.result.success = True
        self._flush(job.result)
        self.last_stage = SwitchStage.IDLE
        logger.info(f"Activated profile '{name}'")
        return job.result

    def _capture(self, job: _Activation):
        job.result.backup_path = self.backups.capture()

    def _write_live(self, job: _Activation):
        job.content = self.pm.read_profile(job.name)
        self.hosts_file.write(job.content)

    def _mark_active(self, job: _Activation):
        self.pm.set_active(job.name)

    # ------------------------------------------------------------------ #
    # Restore                                                              #
    # ------------------------------------------------------------------ #

    def restore_backup(self, backup_id: str) -> OperationResult:
        """Restore a backup to the live file, then flush DNS."""
        result = OperationResult(success=False)
        self._enter(SwitchStage.WRITING, result)
        try:
            result.backup_path = self.backups.restore(backup_id)
        finally:
            self.last_stage = SwitchStage.IDLE
        result.success = True
        self._flush(result)
        self.last_stage = SwitchStage.IDLE
        return result

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    def _enter(self, stage: SwitchStage, result: OperationResult):
        self.last_stage = stage
        result.stage_reached = stage
        logger.debug(f"Switch stage: {stage.value}")

    def _flush(self, result: OperationResult):
        if not self.flush_after_switch:
            return
        self._enter(SwitchStage.FLUSHING, result)
        try:
            self.flush()
        except CacheFlushError as e:
            result.warnings.append(str(e))
            logger.warning(f"DNS flush failed: {e}")
