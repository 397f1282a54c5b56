"""
Switch engine for Heat Save Manager.

Every mutation of the live save root (and of a profile directory during an
export) runs through ``replace_directory``:

    IDLE -> BACKING_UP -> REPLACING -> COMMITTING -> IDLE
                              \\-> ROLLING_BACK -> FAILED

Only one operation may leave IDLE/FAILED at a time; a concurrent caller gets
``BusyError`` immediately instead of queuing.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from heat_save_manager.core.errors import (
    BusyError,
    IOFailureError,
    RollbackFailureError,
)
from heat_save_manager.core.switching.backup import (
    STRATEGY_AUTO,
    BackupStrategy,
    PartialBackupError,
    resolve_backup_strategy,
)
from heat_save_manager.core.switching.file_ops import FileOps, ReservedEntries
from heat_save_manager.domain.models import AppPaths, SwitchResult
from heat_save_manager.utils.status import SwitchState

if TYPE_CHECKING:
    from heat_save_manager.core.profiles.active_marker import ActiveMarker
    from heat_save_manager.core.profiles.profile_store import ProfileStore

log = logging.getLogger(__name__)

DEFAULT_BACKUP_DIR_NAME = ".backup"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SwitchEngine:
    """Backs up, replaces and commits or rolls back the live save root."""

    def __init__(
        self,
        paths: AppPaths,
        store: ProfileStore,
        marker: ActiveMarker,
        *,
        backup_strategy: str | BackupStrategy = STRATEGY_AUTO,
        backup_dir_name: str = DEFAULT_BACKUP_DIR_NAME,
        file_ops: FileOps | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Args:
            paths: Live save root and profiles root
            store: Profile store for target lookup
            marker: Active marker updated on commit
            backup_strategy: ``auto``, ``rename``, ``copy`` or a strategy instance
            backup_dir_name: Directory under the live root holding transient backups
            file_ops: Filesystem operations (injectable for failure tests)
            clock: Source of result timestamps
        """
        self.paths = paths
        self.store = store
        self.marker = marker
        self.backup_strategy = backup_strategy
        self.backup_root = paths.save_game_path / backup_dir_name
        self.file_ops = file_ops or FileOps()
        self.clock = clock
        self._lock = threading.Lock()
        self._state = SwitchState.IDLE

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def reserved_entries(self) -> ReservedEntries:
        """Entries of the live root owned by the manager rather than the game."""
        live = self.paths.save_game_path
        names = set()
        for path in (self.paths.profiles_path, self.marker.path, self.backup_root):
            # Anything nested under the live root protects its top-level entry
            if path.is_relative_to(live) and path != live:
                names.add(path.relative_to(live).parts[0])
        prefixes = (self.marker.temp_prefix,) if self.marker.marker_dir == live else ()
        return ReservedEntries(frozenset(names), prefixes)

    @contextmanager
    def exclusive(self, operation: str) -> Iterator[None]:
        """Hold the engine lock for one operation or fail fast with BusyError."""
        if not self._lock.acquire(blocking=False):
            raise BusyError(f"Another profile operation is in progress ({operation})")
        log.debug("Engine lock acquired for %s", operation)
        try:
            yield
        finally:
            self._lock.release()

    def switch_to(self, profile_name: str) -> SwitchResult:
        """
        Replace the live save root with a profile's contents.

        Args:
            profile_name: Name of an existing profile

        Returns:
            SwitchResult with rolled_back=False

        Raises:
            NotFoundError: if the profile is unknown
            BusyError: if another operation is in progress
            IOFailureError: if the switch failed (see ``rolled_back``)
            RollbackFailureError: if the switch and its rollback both failed
        """
        with self.exclusive("switch"):
            profile = self.store.get(profile_name)
            reserved = self.reserved_entries()
            log.info("Switching live save root to profile %s", profile.name)
            return self.replace_directory(
                self.paths.save_game_path,
                lambda target: self.file_ops.copy_entries(
                    profile.path, target, reserved
                ),
                label=profile.name,
                reserved=reserved,
                commit=lambda: self.marker.write(profile.name),
            )

    def replace_directory(
        self,
        target: Path,
        populate: Callable[[Path], None],
        *,
        label: str,
        reserved: ReservedEntries | None = None,
        commit: Callable[[], None] | None = None,
    ) -> SwitchResult:
        """
        Back up target, refill it via populate, then commit or roll back.
        Must be called while holding ``exclusive``.

        Args:
            target: Directory being replaced
            populate: Writes the new contents into target
            label: Profile name recorded on the result
            reserved: Entries of target left alone throughout
            commit: Runs after populate; a failure here also rolls back
        """
        if not self._lock.locked():
            raise RuntimeError("replace_directory requires the engine lock")
        if not SwitchState.can_start(self._state):
            raise BusyError(f"Engine is {SwitchState.get_name(self._state)}")
        reserved = reserved or ReservedEntries()
        strategy = self._resolve_strategy(target)
        backup_dir = self._new_backup_dir(label)

        self._set_state(SwitchState.BACKING_UP)
        try:
            strategy.create(target, backup_dir, reserved)
        except PartialBackupError as e:
            self._set_state(SwitchState.FAILED)
            log.error("Backup of %s left partially moved into %s", target, backup_dir)
            raise RollbackFailureError(
                f"Backup of {target} failed and could not be undone",
                result=self._result(label, rolled_back=False),
                backup_path=backup_dir,
                cause=e,
                rollback_cause=e.undo_error,
            ) from e
        except Exception as e:
            self._set_state(SwitchState.FAILED)
            log.error("Backup of %s failed: %s", target, e)
            self._remove_empty_backup_root()
            raise IOFailureError(
                f"Could not back up {target}",
                result=self._result(label, rolled_back=False),
                cause=e,
            ) from e

        self._set_state(SwitchState.REPLACING)
        try:
            self.file_ops.clear_dir(target, reserved)
            target.mkdir(parents=True, exist_ok=True)
            populate(target)
            self._set_state(SwitchState.COMMITTING)
            if commit is not None:
                commit()
        except Exception as e:
            self._roll_back(target, strategy, backup_dir, reserved, label, e)

        self._discard_backup(strategy, backup_dir)
        self._set_state(SwitchState.IDLE)
        return self._result(label, rolled_back=False)

    def _roll_back(
        self,
        target: Path,
        strategy: BackupStrategy,
        backup_dir: Path,
        reserved: ReservedEntries,
        label: str,
        error: Exception,
    ) -> None:
        self._set_state(SwitchState.ROLLING_BACK)
        log.warning("Replacing %s failed (%s), restoring backup", target, error)
        try:
            strategy.restore(backup_dir, target, reserved)
        except Exception as rollback_error:
            self._set_state(SwitchState.FAILED)
            log.error(
                "Rollback of %s failed: %s; backup kept at %s",
                target,
                rollback_error,
                backup_dir,
            )
            raise RollbackFailureError(
                f"Replacing {target} failed and the backup could not be restored",
                result=self._result(label, rolled_back=False),
                backup_path=backup_dir,
                cause=error,
                rollback_cause=rollback_error,
            ) from error

        self._discard_backup(strategy, backup_dir)
        self._set_state(SwitchState.FAILED)
        raise IOFailureError(
            f"Replacing {target} failed; previous contents restored",
            result=self._result(label, rolled_back=True),
            cause=error,
        ) from error

    def _discard_backup(self, strategy: BackupStrategy, backup_dir: Path) -> None:
        try:
            strategy.discard(backup_dir)
        except OSError as e:
            log.warning("Could not remove backup %s: %s", backup_dir, e)
            return
        self._remove_empty_backup_root()

    def _remove_empty_backup_root(self) -> None:
        try:
            if self.backup_root.is_dir() and not any(self.backup_root.iterdir()):
                self.backup_root.rmdir()
        except OSError as e:
            log.warning("Could not remove backup directory %s: %s", self.backup_root, e)

    def _resolve_strategy(self, target: Path) -> BackupStrategy:
        if isinstance(self.backup_strategy, BackupStrategy):
            return self.backup_strategy
        strategy = resolve_backup_strategy(
            self.backup_strategy, target, self.backup_root, self.file_ops
        )
        log.debug("Using %s backup strategy for %s", strategy.name, target)
        return strategy

    def _new_backup_dir(self, label: str) -> Path:
        stamp = self.clock().strftime("%Y%m%d-%H%M%S-%f")
        candidate = self.backup_root / f"{stamp}-{label}"
        suffix = 1
        while candidate.exists():
            candidate = self.backup_root / f"{stamp}-{label}-{suffix}"
            suffix += 1
        return candidate

    def _result(self, label: str, *, rolled_back: bool) -> SwitchResult:
        return SwitchResult(
            profile_name=label, switched_at=self.clock(), rolled_back=rolled_back
        )

    def _set_state(self, state: str) -> None:
        log.debug(
            "Engine state %s -> %s",
            SwitchState.get_name(self._state),
            SwitchState.get_name(state),
        )
        self._state = state
