"""
Shared path utilities for Heat Save Manager.
Provides the platform config location and the game's default save layout.
"""

import os
import sys
from pathlib import Path

GAME_DOCUMENTS_DIR = "Need for speed heat"
SAVE_GAME_DIR = "SaveGame"
PROFILES_DIR = "Profiles"


def get_app_config_dir() -> Path:
    """Get the directory holding the manager's settings file.

    Returns:
        Path to the config directory (e.g., .../HeatSaveManager)
    """
    if sys.platform == "win32":
        localappdata = os.environ.get("LOCALAPPDATA")
        if localappdata:
            return Path(localappdata) / "HeatSaveManager"
        return Path.home() / "AppData" / "Local" / "HeatSaveManager"

    # Linux/macOS
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "heat-save-manager"
    return Path.home() / ".config" / "heat-save-manager"


def default_save_game_path(documents_root: Path | None = None) -> Path:
    """Get the game's save directory under the user's Documents folder."""
    documents = documents_root or Path.home() / "Documents"
    return documents / GAME_DOCUMENTS_DIR / SAVE_GAME_DIR


def default_profiles_path(save_game_path: Path) -> Path:
    return save_game_path / PROFILES_DIR
