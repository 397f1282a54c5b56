from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager, nullcontext
from pathlib import Path

from heat_save_manager.core.errors import GameRunningError
from heat_save_manager.core.lifecycle.fresh_profile import FreshProfilePreparer
from heat_save_manager.core.lifecycle.snapshot_export import SnapshotExporter
from heat_save_manager.core.paths.app_paths import get_app_config_dir
from heat_save_manager.core.paths.file_watcher import FileWatcher
from heat_save_manager.core.paths.path_manager import PathManager
from heat_save_manager.core.profiles.active_marker import ActiveMarker
from heat_save_manager.core.profiles.profile_store import ProfileStore
from heat_save_manager.core.settings.settings_manager import SettingsManager
from heat_save_manager.core.switching.file_ops import FileOps
from heat_save_manager.core.switching.switch_engine import (
    DEFAULT_BACKUP_DIR_NAME,
    SwitchEngine,
)
from heat_save_manager.domain.models import AppPaths, Profile, SwitchResult
from heat_save_manager.services.profile_worker import ProfileOperationWorker
from heat_save_manager.utils.platform_utils import PlatformUtils

log = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"

# Service methods a front end may run on a worker thread
BACKGROUND_OPERATIONS = (
    "switch_profile",
    "prepare_fresh_profile",
    "save_current_profile",
    "rename_profile",
    "delete_profile",
)


class SaveManagerService:
    """
    In-process interface consumed by front ends.
    - Builds store, marker and engine from settings
    - Refuses live-root mutations while the game is running
    - Silences the file watcher while the engine rewrites directories
    - Hands a file watcher and worker threads to a GUI front end
    """

    def __init__(
        self,
        settings_manager: SettingsManager,
        *,
        path_manager: PathManager | None = None,
        file_watcher: FileWatcher | None = None,
        file_ops: FileOps | None = None,
        process_checker: Callable[[str], bool] = PlatformUtils.is_process_running,
    ):
        self.settings_manager = settings_manager
        self.path_manager = path_manager or PathManager(settings_manager)
        self.file_watcher = file_watcher
        self.file_ops = file_ops or FileOps()
        self.process_checker = process_checker
        self._build(self.path_manager.get_paths())

    @classmethod
    def from_config_dir(cls, config_dir: Path | None = None, **kwargs):
        """Create the service from the settings file in the app config dir."""
        settings_file = (config_dir or get_app_config_dir()) / SETTINGS_FILE_NAME
        return cls(SettingsManager(settings_file), **kwargs)

    def _build(self, paths: AppPaths) -> None:
        self.paths = paths
        self.marker = ActiveMarker(paths.marker_dir())
        self.store = ProfileStore(
            paths.profiles_path,
            self.marker,
            self.settings_manager.get_required_profile_dirs(),
            self.file_ops,
        )
        self.engine = SwitchEngine(
            paths,
            self.store,
            self.marker,
            backup_strategy=self.settings_manager.get_backup_strategy(),
            backup_dir_name=self.settings_manager.get("backup_dir_name")
            or DEFAULT_BACKUP_DIR_NAME,
            file_ops=self.file_ops,
        )
        self.preparer = FreshProfilePreparer(self.engine)
        self.exporter = SnapshotExporter(self.engine)
        if self.file_watcher is not None:
            self.file_watcher.watch(paths)
        log.debug(
            "Save manager rooted at %s (profiles: %s)",
            paths.save_game_path,
            paths.profiles_path,
        )

    def attach_watcher(self, file_watcher: FileWatcher) -> FileWatcher:
        """Report directory changes through file_watcher from now on."""
        self.file_watcher = file_watcher
        file_watcher.watch(self.paths)
        return file_watcher

    def make_worker(self, operation: str, *args) -> ProfileOperationWorker:
        """
        Wrap one operation in a QThread worker so a GUI thread never blocks.

        Args:
            operation: One of ``BACKGROUND_OPERATIONS``, e.g. ``"switch_profile"``
            *args: Arguments passed to the operation

        Returns:
            A worker that has not been started yet
        """
        if operation not in BACKGROUND_OPERATIONS:
            raise ValueError(f"Not a background operation: {operation}")
        return ProfileOperationWorker(getattr(self, operation), *args)

    def get_paths(self) -> AppPaths:
        return self.paths

    def set_save_game_path(self, save_game_path: str) -> AppPaths:
        with self.engine.exclusive("set save game path"):
            paths = self.path_manager.set_save_game_path(save_game_path)
        self._build(paths)
        return paths

    def list_profiles(self) -> list[Profile]:
        return self.store.list_profiles()

    def get_active_profile(self) -> str:
        return self.marker.read()

    def switch_profile(self, profile_name: str) -> SwitchResult:
        with self._mutation(touches_live_root=True):
            return self.engine.switch_to(profile_name)

    def prepare_fresh_profile(self, profile_name: str) -> None:
        with self._mutation(touches_live_root=True):
            self.preparer.prepare_fresh(profile_name)

    def save_current_profile(self, profile_name: str | None = None) -> None:
        with self._mutation(touches_live_root=True):
            self.exporter.export_current(profile_name)

    def rename_profile(self, old_name: str, new_name: str) -> None:
        with self._mutation(touches_live_root=False):
            with self.engine.exclusive("rename"):
                self.store.rename(old_name, new_name)

    def delete_profile(self, profile_name: str) -> None:
        with self._mutation(touches_live_root=False):
            with self.engine.exclusive("delete"):
                self.store.delete(profile_name)

    @contextmanager
    def _mutation(self, *, touches_live_root: bool) -> Iterator[None]:
        if touches_live_root:
            self._ensure_game_not_running()
        watcher_guard = (
            self.file_watcher.suspended()
            if self.file_watcher is not None
            else nullcontext()
        )
        with watcher_guard:
            yield

    def _ensure_game_not_running(self) -> None:
        if not self.settings_manager.get("check_game_running", True):
            return
        executable = self.settings_manager.get("game_executable") or ""
        if executable and self.process_checker(executable):
            raise GameRunningError(f"{executable} is running; close the game first")
