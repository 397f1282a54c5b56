from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from heat_save_manager.core.errors import (
    ActiveProfileGuardError,
    AlreadyExistsError,
    InvalidNameError,
    IOFailureError,
    NotFoundError,
)
from heat_save_manager.core.profiles.active_marker import ActiveMarker
from heat_save_manager.core.profiles.naming import validate_profile_name
from heat_save_manager.core.switching.file_ops import FileOps
from heat_save_manager.domain.models import Profile

log = logging.getLogger(__name__)


class ProfileStore:
    """
    Named profile directories under a single root.
    Each immediate subdirectory is one profile; its contents are opaque.
    """

    def __init__(
        self,
        profiles_path: Path,
        marker: ActiveMarker,
        required_dirs: Iterable[str] = (),
        file_ops: FileOps | None = None,
    ):
        """
        Args:
            profiles_path: Root holding one directory per profile
            marker: Active marker consulted by the rename/delete guard
            required_dirs: Subdirectories a profile must contain to be listed
            file_ops: Filesystem operations used for deletion
        """
        self.profiles_path = profiles_path
        self.marker = marker
        self.required_dirs = tuple(required_dirs)
        self.file_ops = file_ops or FileOps()

    def list_names(self) -> list[str]:
        if not self.profiles_path.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.profiles_path.iterdir()
            if self._is_profile_dir(entry)
        )

    def list_profiles(self) -> list[Profile]:
        return [Profile(name, self.profiles_path / name) for name in self.list_names()]

    def profile_path(self, name: str) -> Path:
        return self.profiles_path / validate_profile_name(name)

    def exists(self, name: str) -> bool:
        try:
            path = self.profile_path(name)
        except InvalidNameError:
            return False
        return self._is_profile_dir(path)

    def get(self, name: str) -> Profile:
        path = self.profile_path(name)
        if not self._is_profile_dir(path):
            raise NotFoundError(f"Profile not found: {path.name}")
        return Profile(path.name, path)

    def create(self, name: str) -> Profile:
        path = self.profile_path(name)
        if path.exists():
            raise AlreadyExistsError(f"Profile already exists: {path.name}")
        try:
            path.mkdir(parents=True)
        except FileExistsError as e:
            raise AlreadyExistsError(
                f"Profile already exists: {path.name}", cause=e
            ) from e
        except OSError as e:
            raise IOFailureError(
                f"Could not create profile {path.name}", cause=e
            ) from e
        log.info("Created profile %s", path.name)
        return Profile(path.name, path)

    def rename(self, old_name: str, new_name: str) -> Profile:
        old = self.get(old_name)
        new_path = self.profile_path(new_name)
        if new_path.exists():
            raise AlreadyExistsError(f"Profile already exists: {new_path.name}")
        self._guard_active(old.name, "rename")
        try:
            old.path.rename(new_path)
        except OSError as e:
            raise IOFailureError(
                f"Could not rename profile {old.name} to {new_path.name}", cause=e
            ) from e
        log.info("Renamed profile %s to %s", old.name, new_path.name)
        return Profile(new_path.name, new_path)

    def delete(self, name: str) -> None:
        profile = self.get(name)
        self._guard_active(profile.name, "delete")
        try:
            self.file_ops.remove_tree(profile.path)
        except OSError as e:
            raise IOFailureError(
                f"Could not delete profile {profile.name}", cause=e
            ) from e
        log.info("Deleted profile %s", profile.name)

    def _guard_active(self, name: str, operation: str) -> None:
        if self.marker.read() == name:
            raise ActiveProfileGuardError(
                f"Cannot {operation} the active profile: {name}"
            )

    def _is_profile_dir(self, path: Path) -> bool:
        if not path.is_dir():
            return False
        return all((path / required).is_dir() for required in self.required_dirs)
