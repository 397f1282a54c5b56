from __future__ import annotations

from heat_save_manager.core.errors import InvalidNameError

# Characters rejected by Windows in file names; also covers both path separators
INVALID_NAME_CHARS = set('<>:"/\\|?*')


def validate_profile_name(name: str | None) -> str:
    """
    Check a profile name and return it trimmed.

    Raises:
        InvalidNameError: if the name is empty, contains separators or
            reserved characters, or would resolve outside the profiles root
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise InvalidNameError("Profile name is required")
    if trimmed in (".", ".."):
        raise InvalidNameError(f"Invalid profile name: {trimmed!r}")
    if any(ch in INVALID_NAME_CHARS or ord(ch) < 32 for ch in trimmed):
        raise InvalidNameError(f"Profile name contains invalid characters: {trimmed!r}")
    if trimmed.endswith("."):
        raise InvalidNameError(f"Profile name must not end with a dot: {trimmed!r}")
    return trimmed
