"""
Directory-tree primitives used by the switch engine.
Kept behind a small class so tests can inject failures at any step.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservedEntries:
    """Names inside a directory that belong to the manager, not the game."""

    names: frozenset[str] = field(default_factory=frozenset)
    prefixes: tuple[str, ...] = ()

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name in self.names or any(name.startswith(p) for p in self.prefixes)


NO_RESERVED = ReservedEntries()


class FileOps:
    """
    Local filesystem operations.
    - Copies preserve relative paths, file bytes and metadata (copy2)
    - Symlinks are copied as links, never followed
    - Missing directories list as empty; copying from one is an error
    """

    def list_entries(
        self, directory: Path, reserved: ReservedEntries = NO_RESERVED
    ) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(
            entry for entry in directory.iterdir() if entry.name not in reserved
        )

    def copy_entries(
        self,
        source: Path,
        destination: Path,
        reserved: ReservedEntries = NO_RESERVED,
    ) -> None:
        """
        Copy every non-reserved entry of source into destination.

        Args:
            source: Directory to read from
            destination: Directory to write into (created if missing)
            reserved: Entry names skipped on both sides

        Raises:
            FileNotFoundError: if source does not exist
            NotADirectoryError: if source is not a directory
        """
        if not source.exists():
            raise FileNotFoundError(f"Source directory does not exist: {source}")
        if not source.is_dir():
            raise NotADirectoryError(f"Expected directory: {source}")
        destination.mkdir(parents=True, exist_ok=True)
        for entry in self.list_entries(source, reserved):
            target = destination / entry.name
            if entry.is_dir() and not entry.is_symlink():
                shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(entry, target, follow_symlinks=False)

    def clear_dir(
        self, directory: Path, reserved: ReservedEntries = NO_RESERVED
    ) -> None:
        """Remove every non-reserved entry of directory, keeping the directory."""
        for entry in self.list_entries(directory, reserved):
            self.remove_entry(entry)

    def remove_entry(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)

    def remove_tree(self, path: Path) -> None:
        if path.is_symlink() or path.exists():
            self.remove_entry(path)

    def move(self, source: Path, destination: Path) -> None:
        # os.rename rather than shutil.move: a cross-device move must fail, not copy
        os.rename(source, destination)

    @staticmethod
    def same_device(first: Path, second: Path) -> bool:
        """Check whether two paths, or their existing parents, share a device."""
        try:
            return (
                _existing_ancestor(first).stat().st_dev
                == _existing_ancestor(second).stat().st_dev
            )
        except OSError as e:
            log.debug("Could not compare devices of %s and %s: %s", first, second, e)
            return False


def _existing_ancestor(path: Path) -> Path:
    current = path
    while not current.exists() and current != current.parent:
        current = current.parent
    return current
