"""
Backup strategies for the switch engine.

A strategy takes the transient backup of a directory before it is replaced,
puts it back on rollback, and discards it on success. ``rename`` moves the
entries (one filesystem, near-zero vulnerability window); ``copy`` duplicates
them (works across devices, exposed for the copy duration).
"""

from __future__ import annotations

import logging
from pathlib import Path

from heat_save_manager.core.switching.file_ops import (
    NO_RESERVED,
    FileOps,
    ReservedEntries,
)

log = logging.getLogger(__name__)

STRATEGY_AUTO = "auto"
STRATEGY_RENAME = "rename"
STRATEGY_COPY = "copy"
STRATEGY_NAMES = (STRATEGY_AUTO, STRATEGY_RENAME, STRATEGY_COPY)


class PartialBackupError(OSError):
    """Taking a backup failed and the source could not be put back together."""

    def __init__(self, message: str, undo_error: BaseException):
        super().__init__(message)
        self.undo_error = undo_error


class BackupStrategy:
    name = ""

    def __init__(self, file_ops: FileOps | None = None):
        self.file_ops = file_ops or FileOps()

    def create(
        self, source: Path, backup_dir: Path, reserved: ReservedEntries = NO_RESERVED
    ) -> None:
        raise NotImplementedError

    def restore(
        self, backup_dir: Path, target: Path, reserved: ReservedEntries = NO_RESERVED
    ) -> None:
        raise NotImplementedError

    def discard(self, backup_dir: Path) -> None:
        self.file_ops.remove_tree(backup_dir)


class CopyBackupStrategy(BackupStrategy):
    name = STRATEGY_COPY

    def create(self, source, backup_dir, reserved=NO_RESERVED):
        if not source.exists():
            # Nothing to protect yet (a profile being exported for the first time)
            backup_dir.mkdir(parents=True, exist_ok=True)
            return
        try:
            self.file_ops.copy_entries(source, backup_dir, reserved)
        except OSError:
            # Source is untouched; only the half-written copy needs to go
            try:
                self.file_ops.remove_tree(backup_dir)
            except OSError as cleanup_error:
                log.warning(
                    "Could not remove partial backup %s: %s", backup_dir, cleanup_error
                )
            raise

    def restore(self, backup_dir, target, reserved=NO_RESERVED):
        self.file_ops.clear_dir(target, reserved)
        self.file_ops.copy_entries(backup_dir, target, reserved)


class RenameBackupStrategy(BackupStrategy):
    name = STRATEGY_RENAME

    def create(self, source, backup_dir, reserved=NO_RESERVED):
        backup_dir.mkdir(parents=True, exist_ok=True)
        moved: list[Path] = []
        try:
            for entry in self.file_ops.list_entries(source, reserved):
                self.file_ops.move(entry, backup_dir / entry.name)
                moved.append(entry)
        except OSError as e:
            log.warning("Backup by rename failed after %d entries: %s", len(moved), e)
            try:
                for entry in reversed(moved):
                    self.file_ops.move(backup_dir / entry.name, entry)
                self.file_ops.remove_tree(backup_dir)
            except OSError as undo_error:
                raise PartialBackupError(
                    f"Could not move entries back from {backup_dir}", undo_error
                ) from e
            raise

    def restore(self, backup_dir, target, reserved=NO_RESERVED):
        self.file_ops.clear_dir(target, reserved)
        target.mkdir(parents=True, exist_ok=True)
        for entry in self.file_ops.list_entries(backup_dir):
            self.file_ops.move(entry, target / entry.name)


def resolve_backup_strategy(
    name: str, source: Path, backup_root: Path, file_ops: FileOps | None = None
) -> BackupStrategy:
    """
    Build the strategy for one operation.

    Args:
        name: One of ``auto``, ``rename`` or ``copy``
        source: Directory about to be backed up
        backup_root: Directory the backup will be created under
        file_ops: Operations shared with the engine

    Returns:
        A strategy instance
    """
    file_ops = file_ops or FileOps()
    if name == STRATEGY_RENAME:
        return RenameBackupStrategy(file_ops)
    if name == STRATEGY_COPY:
        return CopyBackupStrategy(file_ops)
    if name == STRATEGY_AUTO:
        if FileOps.same_device(source, backup_root):
            return RenameBackupStrategy(file_ops)
        log.debug(
            "%s and %s are on different devices, backing up by copy",
            source,
            backup_root,
        )
        return CopyBackupStrategy(file_ops)
    raise ValueError(f"Unknown backup strategy: {name}")
