"""
Path management for Heat Save Manager.
Resolves the live save root and profiles root from settings or defaults.
"""

import logging
from pathlib import Path

from heat_save_manager.core.errors import InvalidPathError
from heat_save_manager.core.paths.app_paths import (
    default_profiles_path,
    default_save_game_path,
)
from heat_save_manager.domain.models import AppPaths

log = logging.getLogger(__name__)


class PathManager:
    """Manages resolution of the save game and profiles directories."""

    def __init__(self, settings_manager, documents_root: Path | None = None):
        """
        Initialize path manager.

        Args:
            settings_manager: Reference to SettingsManager
            documents_root: Optional override of the user's Documents folder
        """
        self.settings_manager = settings_manager
        self.documents_root = documents_root

    def get_paths(self) -> AppPaths:
        """
        Get the configured paths, falling back to the game's default layout.

        Returns:
            AppPaths with both directories resolved
        """
        save_str = (self.settings_manager.get("save_game_path") or "").strip()
        save_game_path = (
            Path(save_str).expanduser()
            if save_str
            else default_save_game_path(self.documents_root)
        )

        profiles_str = (self.settings_manager.get("profiles_path") or "").strip()
        profiles_path = (
            Path(profiles_str).expanduser()
            if profiles_str
            else default_profiles_path(save_game_path)
        )
        return AppPaths(save_game_path=save_game_path, profiles_path=profiles_path)

    def set_save_game_path(self, save_game_path: str) -> AppPaths:
        """
        Re-root the manager at a new save directory.
        The profiles directory follows it to ``<save>/Profiles``.

        Args:
            save_game_path: New live save root

        Returns:
            The new AppPaths
        """
        trimmed = (save_game_path or "").strip()
        if not trimmed:
            raise InvalidPathError("Save game path is required")
        root = Path(trimmed).expanduser()
        self.settings_manager.update(
            {
                "save_game_path": str(root),
                "profiles_path": str(default_profiles_path(root)),
            }
        )
        log.info("Save game path set to %s", root)
        return self.get_paths()
