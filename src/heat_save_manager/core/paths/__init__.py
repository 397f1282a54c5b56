"""Path management module for Heat Save Manager."""

from .file_watcher import FileWatcher
from .path_manager import PathManager

__all__ = ["PathManager", "FileWatcher"]
