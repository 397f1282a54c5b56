"""Profile storage module for Heat Save Manager."""

from .active_marker import MARKER_FILE_NAME, ActiveMarker
from .naming import validate_profile_name
from .profile_store import ProfileStore

__all__ = ["ActiveMarker", "MARKER_FILE_NAME", "ProfileStore", "validate_profile_name"]
