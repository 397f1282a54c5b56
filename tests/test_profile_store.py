import pytest

from heat_save_manager.core.errors import (
    ActiveProfileGuardError,
    AlreadyExistsError,
    IOFailureError,
    InvalidNameError,
    NotFoundError,
)
from heat_save_manager.core.profiles.profile_store import ProfileStore

from conftest import write_tree


@pytest.fixture
def store(env):
    return ProfileStore(env.profiles, env.marker)


def test_list_is_sorted_and_skips_files(env, store):
    (env.profiles / "Zed").mkdir()
    (env.profiles / "alpha").mkdir()
    (env.profiles / "notes.txt").write_text("not a profile", encoding="utf-8")

    assert store.list_names() == ["Zed", "alpha"]
    assert [p.path for p in store.list_profiles()] == [
        env.profiles / "Zed",
        env.profiles / "alpha",
    ]


def test_list_missing_root_is_empty(tmp_path, env):
    store = ProfileStore(tmp_path / "nowhere", env.marker)
    assert store.list_names() == []
    assert not (tmp_path / "nowhere").exists()


def test_list_honours_required_layout(env):
    write_tree(env.profiles / "complete", {"savegame/a.sav": "a", "wraps/w": "w"})
    write_tree(env.profiles / "partial", {"savegame/a.sav": "a"})
    store = ProfileStore(env.profiles, env.marker, required_dirs=["savegame", "wraps"])

    assert store.list_names() == ["complete"]
    assert store.exists("complete")
    assert not store.exists("partial")


@pytest.mark.parametrize("name", ["Career", "Race Night 2", "drift-only"])
def test_create_then_delete_leaves_list_unchanged(store, name):
    (store.profiles_path / "Existing").mkdir()
    before = store.list_names()

    profile = store.create(name)
    assert profile.path.is_dir()
    assert not any(profile.path.iterdir())
    assert name in store.list_names()

    store.delete(name)
    assert store.list_names() == before


@pytest.mark.parametrize(
    "name", ["", "   ", "..", ".", "a/b", "a\\b", "../escape", "bad:name", "trail.", "x\x01"]
)
def test_create_rejects_invalid_names(store, name):
    with pytest.raises(InvalidNameError):
        store.create(name)
    assert store.list_names() == []


def test_create_existing_fails(store):
    store.create("Career")
    with pytest.raises(AlreadyExistsError):
        store.create("Career")


def test_create_makes_missing_root(tmp_path, env):
    store = ProfileStore(tmp_path / "fresh" / "Profiles", env.marker)
    store.create("First")
    assert store.list_names() == ["First"]


def test_rename_moves_directory_and_keeps_marker(env, store):
    write_tree(env.profiles / "Old", {"savegame/a.sav": "data"})
    store.create("Active")
    env.marker.write("Active")

    renamed = store.rename("Old", "New")

    assert renamed.name == "New"
    assert store.list_names() == ["Active", "New"]
    assert (env.profiles / "New" / "savegame" / "a.sav").read_text() == "data"
    assert env.marker.read() == "Active"


def test_rename_errors(store):
    store.create("A")
    store.create("B")
    with pytest.raises(NotFoundError):
        store.rename("Missing", "C")
    with pytest.raises(AlreadyExistsError):
        store.rename("A", "B")
    with pytest.raises(InvalidNameError):
        store.rename("A", "../C")


def test_rename_and_delete_of_active_profile_are_rejected(env, store):
    write_tree(env.profiles / "Main", {"savegame/a.sav": "keep"})
    env.marker.write("Main")

    with pytest.raises(ActiveProfileGuardError):
        store.rename("Main", "Other")
    with pytest.raises(ActiveProfileGuardError):
        store.delete("Main")

    assert (env.profiles / "Main" / "savegame" / "a.sav").read_text() == "keep"
    assert not (env.profiles / "Other").exists()
    assert env.marker.read() == "Main"


def test_delete_missing_profile(store):
    with pytest.raises(NotFoundError):
        store.delete("Ghost")


def test_get_unknown_profile(store):
    with pytest.raises(NotFoundError):
        store.get("Ghost")
    assert not store.exists("Ghost")
    assert not store.exists("../etc")


def test_delete_with_unreadable_marker_fails_cleanly(env, store):
    write_tree(env.profiles / "A", {"a": "a"})
    env.marker.path.write_bytes(b"\xff\xfeA\n")

    with pytest.raises(IOFailureError):
        store.delete("A")
    assert (env.profiles / "A").is_dir()
