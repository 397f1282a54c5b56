import logging

import pytest
from PySide6.QtCore import QTimer

from heat_save_manager import main as main_module
from heat_save_manager.core.cli import run_cli
from heat_save_manager.core.settings.settings_manager import SettingsManager
from heat_save_manager.services.save_manager_service import SaveManagerService

from conftest import live_tree, write_tree


@pytest.fixture
def service(tmp_path, env):
    settings = SettingsManager(tmp_path / "settings.json")
    settings.update(
        {"save_game_path": str(env.save), "profiles_path": str(env.profiles)}
    )
    return SaveManagerService(settings, process_checker=lambda exe: False)


def test_list_marks_active_profile(env, service, capsys):
    write_tree(env.profiles / "A", {"a": "a"})
    write_tree(env.profiles / "B", {"b": "b"})
    env.marker.write("B")

    assert run_cli(["list"], service=service) == 0
    assert capsys.readouterr().out.splitlines() == ["  A", "* B"]


def test_switch_and_active(env, service, capsys):
    write_tree(env.profiles / "A", {"a": "a"})

    assert run_cli(["switch", "A"], service=service) == 0
    assert run_cli(["active"], service=service) == 0
    out = capsys.readouterr().out
    assert "switched to A" in out
    assert out.splitlines()[-1] == "A"
    assert live_tree(env) == {"a": b"a"}


def test_errors_print_kind_and_exit_nonzero(service, capsys):
    assert run_cli(["switch", "Ghost"], service=service) == 1
    err = capsys.readouterr().err
    assert "error [not_found]" in err


def test_save_without_name_uses_active(env, service):
    write_tree(env.profiles / "A", {"a": "a"})
    run_cli(["switch", "A"], service=service)
    write_tree(env.save, {"progress.sav": "p"})

    assert run_cli(["save"], service=service) == 0
    assert (env.profiles / "A" / "progress.sav").read_text() == "p"


def test_paths_command(env, service, capsys):
    assert run_cli(["paths"], service=service) == 0
    out = capsys.readouterr().out
    assert str(env.save) in out
    assert str(env.profiles) in out


def test_invalid_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers[:] = []
    try:
        main_module.setup_logging()
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_unreadable_marker_reports_io_failure(env, service, capsys):
    env.marker.path.write_bytes(b"\xff\xfe")

    assert run_cli(["active"], service=service) == 1
    assert "error [io_failure]" in capsys.readouterr().err


def test_watch_prints_directory_changes(qapp, env, service, capsys):
    def change_then_quit():
        service.file_watcher._on_directory_changed(str(env.save))
        qapp.quit()

    QTimer.singleShot(0, change_then_quit)
    assert run_cli(["watch"], service=service) == 0

    out = capsys.readouterr().out
    assert f"live save root changed: {env.save}" in out
    assert str(env.profiles) in service.file_watcher.get_watched_directories()
