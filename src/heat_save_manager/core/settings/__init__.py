"""Settings management module for Heat Save Manager."""

from .settings_manager import SettingsManager

__all__ = ["SettingsManager"]
