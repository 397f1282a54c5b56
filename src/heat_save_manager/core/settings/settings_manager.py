"""
Settings manager for handling persistent application settings.
Manages JSON-based configuration storage.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from heat_save_manager.core.switching.backup import STRATEGY_AUTO, STRATEGY_NAMES
from heat_save_manager.core.switching.switch_engine import DEFAULT_BACKUP_DIR_NAME

log = logging.getLogger(__name__)

DEFAULT_GAME_EXECUTABLE = "NeedForSpeedHeat.exe"


class SettingsManager:
    """Manages loading and saving of application settings to JSON file."""

    def __init__(self, settings_file: Path):
        """
        Initialize the settings manager.

        Args:
            settings_file: Path to the JSON settings file
        """
        self.settings_file = settings_file
        self._settings_cache: Dict[str, Any] = {}
        self.load_settings()

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from the JSON file, filling in missing keys with defaults.

        Returns:
            Dictionary containing all settings
        """
        self._settings_cache = self._get_default_settings()
        if not self.settings_file.exists():
            return self._settings_cache

        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.error("Error loading settings from %s: %s", self.settings_file, e)
            return self._settings_cache

        if isinstance(stored, dict):
            self._settings_cache.update(stored)
        else:
            log.error("Ignoring malformed settings in %s", self.settings_file)
        return self._settings_cache

    def save_settings(self) -> bool:
        """
        Save current settings to the JSON file.

        Returns:
            True if successful, False otherwise
        """
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w", encoding="utf-8") as f:
                json.dump(self._settings_cache, f, indent=4)
            return True
        except IOError as e:
            log.error("Error saving settings to %s: %s", self.settings_file, e)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings_cache.get(key, default)

    def set(self, key: str, value: Any, auto_save: bool = True) -> None:
        """
        Set a setting value.

        Args:
            key: Setting key
            value: Setting value
            auto_save: Whether to automatically save to file
        """
        self._settings_cache[key] = value
        if auto_save:
            self.save_settings()

    def update(self, settings: Dict[str, Any], auto_save: bool = True) -> None:
        self._settings_cache.update(settings)
        if auto_save:
            self.save_settings()

    def get_backup_strategy(self) -> str:
        """
        Get the configured backup strategy, falling back to ``auto``.

        Returns:
            One of ``auto``, ``rename`` or ``copy``
        """
        strategy = str(self.get("backup_strategy", STRATEGY_AUTO)).strip().lower()
        if strategy not in STRATEGY_NAMES:
            log.warning("Unknown backup strategy %r, using %s", strategy, STRATEGY_AUTO)
            return STRATEGY_AUTO
        return strategy

    def get_required_profile_dirs(self) -> list[str]:
        value = self.get("required_profile_dirs") or []
        return [str(item) for item in value if str(item).strip()]

    def _get_default_settings(self) -> Dict[str, Any]:
        return {
            "save_game_path": "",
            "profiles_path": "",
            "backup_strategy": STRATEGY_AUTO,
            "backup_dir_name": DEFAULT_BACKUP_DIR_NAME,
            "check_game_running": True,
            "game_executable": DEFAULT_GAME_EXECUTABLE,
            "required_profile_dirs": [],
        }

    def get_all_settings(self) -> Dict[str, Any]:
        return self._settings_cache.copy()
