from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from heat_save_manager.core.errors import IOFailureError
from heat_save_manager.core.profiles.naming import validate_profile_name

log = logging.getLogger(__name__)

MARKER_FILE_NAME = "active_profile.txt"


class ActiveMarker:
    """
    Persists the name of the profile the live save root currently holds.
    An absent or empty file means no profile is active.
    """

    def __init__(self, marker_dir: Path, file_name: str = MARKER_FILE_NAME):
        self.marker_dir = marker_dir
        self.file_name = file_name

    @property
    def path(self) -> Path:
        return self.marker_dir / self.file_name

    @property
    def temp_prefix(self) -> str:
        """Prefix of the temporary files written next to the marker."""
        return f".{self.file_name}."

    def read(self) -> str:
        """
        Returns:
            The active profile name, or "" when none is set

        Raises:
            IOFailureError: if the marker exists but cannot be read or decoded
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            log.error("Could not read active profile marker %s: %s", self.path, e)
            raise IOFailureError(
                f"Could not read active profile marker {self.path}", cause=e
            ) from e
        return content.strip()

    def write(self, profile_name: str) -> None:
        """
        Atomically replace the marker. An empty name clears it.

        Args:
            profile_name: Name of the now-active profile
        """
        trimmed = profile_name.strip()
        if not trimmed:
            self.clear()
            return
        validate_profile_name(trimmed)

        try:
            self.marker_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=self.temp_prefix, suffix=".tmp", dir=self.marker_dir
            )
        except OSError as e:
            raise IOFailureError(
                f"Could not write active profile marker {self.path}", cause=e
            ) from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(trimmed + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise IOFailureError(
                f"Could not write active profile marker {self.path}", cause=e
            ) from e
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Active profile marker set to %s", trimmed)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise IOFailureError(
                f"Could not clear active profile marker {self.path}", cause=e
            ) from e
        log.debug("Active profile marker cleared")
