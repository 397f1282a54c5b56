"""
File system watcher for Heat Save Manager.
Monitors the live save root and the profiles root for changes.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from PySide6.QtCore import QFileSystemWatcher, QObject, Signal

from heat_save_manager.domain.models import AppPaths


class FileWatcher(QObject):
    """Watches save directories so a front end can refresh after game writes."""

    # Signals
    live_root_changed = Signal(str)  # Emitted when the live save root changes
    profiles_changed = Signal(str)  # Emitted when the profiles root changes

    def __init__(self, parent=None):
        super().__init__(parent)
        self.watcher = QFileSystemWatcher()
        self._live_root: str | None = None
        self._profiles_root: str | None = None

        self.watcher.directoryChanged.connect(self._on_directory_changed)

    def watch(self, paths: AppPaths) -> None:
        """
        Point the watcher at a new pair of roots, dropping the previous ones.

        Args:
            paths: Live save root and profiles root
        """
        self.clear_all()
        live = str(paths.save_game_path)
        profiles = str(paths.profiles_path)
        if self._add_directory(live):
            self._live_root = live
        if self._add_directory(profiles):
            self._profiles_root = profiles

    def clear_all(self) -> None:
        """Remove all watched paths."""
        directories = self.watcher.directories()
        if directories:
            self.watcher.removePaths(directories)
        self._live_root = None
        self._profiles_root = None

    def get_watched_directories(self) -> list[str]:
        return list(self.watcher.directories())

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """Block change signals while the engine rewrites the watched trees."""
        was_blocked = self.blockSignals(True)
        try:
            yield
        finally:
            self.blockSignals(was_blocked)

    def _add_directory(self, directory: str) -> bool:
        if Path(directory).is_dir():
            return self.watcher.addPath(directory)
        return False

    def _on_directory_changed(self, path: str) -> None:
        # Re-add the path if it still exists (Qt removes it after change)
        if Path(path).is_dir() and path not in self.watcher.directories():
            self.watcher.addPath(path)

        if path == self._live_root:
            self.live_root_changed.emit(path)
        elif path == self._profiles_root:
            self.profiles_changed.emit(path)
