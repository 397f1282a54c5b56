import json
import sys
from pathlib import Path

import pytest

from heat_save_manager.core.errors import InvalidPathError
from heat_save_manager.core.paths.app_paths import get_app_config_dir
from heat_save_manager.core.paths.path_manager import PathManager
from heat_save_manager.core.settings.settings_manager import SettingsManager


def test_defaults_when_file_missing(tmp_path):
    settings = SettingsManager(tmp_path / "settings.json")
    assert settings.get("backup_strategy") == "auto"
    assert settings.get("check_game_running") is True
    assert settings.get("game_executable") == "NeedForSpeedHeat.exe"
    assert settings.get_required_profile_dirs() == []
    assert not (tmp_path / "settings.json").exists()


def test_settings_persist_and_merge_defaults(tmp_path):
    path = tmp_path / "cfg" / "settings.json"
    settings = SettingsManager(path)
    settings.set("backup_strategy", "copy")
    assert json.loads(path.read_text(encoding="utf-8"))["backup_strategy"] == "copy"

    path.write_text(json.dumps({"backup_strategy": "rename"}), encoding="utf-8")
    reloaded = SettingsManager(path)
    assert reloaded.get_backup_strategy() == "rename"
    assert reloaded.get("backup_dir_name") == ".backup"


def test_malformed_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert SettingsManager(path).get("backup_strategy") == "auto"

    path.write_text("[1, 2]", encoding="utf-8")
    assert SettingsManager(path).get("check_game_running") is True


def test_unknown_backup_strategy_falls_back_to_auto(tmp_path):
    settings = SettingsManager(tmp_path / "settings.json")
    settings.set("backup_strategy", "Teleport", auto_save=False)
    assert settings.get_backup_strategy() == "auto"
    settings.set("backup_strategy", " COPY ", auto_save=False)
    assert settings.get_backup_strategy() == "copy"


def test_default_paths_follow_documents_layout(tmp_path):
    manager = PathManager(SettingsManager(tmp_path / "s.json"), documents_root=tmp_path)
    paths = manager.get_paths()
    assert paths.save_game_path == tmp_path / "Need for speed heat" / "SaveGame"
    assert paths.profiles_path == paths.save_game_path / "Profiles"
    assert paths.marker_dir() == paths.save_game_path


def test_configured_paths_win(tmp_path):
    settings = SettingsManager(tmp_path / "s.json")
    settings.update(
        {"save_game_path": str(tmp_path / "live"), "profiles_path": str(tmp_path / "p")}
    )
    paths = PathManager(settings).get_paths()
    assert paths.save_game_path == tmp_path / "live"
    assert paths.profiles_path == tmp_path / "p"


def test_set_save_game_path_reroots_profiles(tmp_path):
    settings = SettingsManager(tmp_path / "s.json")
    manager = PathManager(settings)

    paths = manager.set_save_game_path(f"  {tmp_path / 'Elsewhere'}  ")

    assert paths.save_game_path == tmp_path / "Elsewhere"
    assert paths.profiles_path == tmp_path / "Elsewhere" / "Profiles"
    assert SettingsManager(tmp_path / "s.json").get("save_game_path") == str(
        tmp_path / "Elsewhere"
    )


def test_set_blank_save_game_path(tmp_path):
    manager = PathManager(SettingsManager(tmp_path / "s.json"))
    with pytest.raises(InvalidPathError):
        manager.set_save_game_path("   ")


def test_app_config_dir_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_app_config_dir() == Path(tmp_path) / "heat-save-manager"
