import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from heat_save_manager.core.profiles.active_marker import ActiveMarker  # noqa: E402
from heat_save_manager.core.profiles.profile_store import ProfileStore  # noqa: E402
from heat_save_manager.core.switching.switch_engine import SwitchEngine  # noqa: E402
from heat_save_manager.domain.models import AppPaths  # noqa: E402

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)

# Entries the manager keeps inside the live root in the default layout
MANAGER_ENTRIES = {"Profiles", ".backup", "active_profile.txt"}


def write_tree(root: Path, files: dict) -> None:
    """Create files (relative posix path -> str/bytes content) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)


def read_tree(root: Path, skip=()) -> dict:
    """Map every file under root to its bytes, skipping top-level names in skip."""
    result = {}
    if not root.is_dir():
        return result
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root)
        if rel.parts[0] in skip:
            continue
        if path.is_file():
            result[rel.as_posix()] = path.read_bytes()
    return result


def live_tree(env) -> dict:
    return read_tree(env.save, skip=MANAGER_ENTRIES)


@pytest.fixture
def env(tmp_path):
    """Default layout: profiles and marker live inside the save game root."""
    save = tmp_path / "SaveGame"
    profiles = save / "Profiles"
    profiles.mkdir(parents=True)
    marker = ActiveMarker(save)
    return SimpleNamespace(
        save=save,
        profiles=profiles,
        marker=marker,
        paths=AppPaths(save_game_path=save, profiles_path=profiles),
    )


@pytest.fixture
def make_engine(env):
    def factory(**kwargs):
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        store = ProfileStore(env.profiles, env.marker, file_ops=kwargs.get("file_ops"))
        return SwitchEngine(env.paths, store, env.marker, **kwargs)

    return factory


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
