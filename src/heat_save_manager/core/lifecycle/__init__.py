"""Profile lifecycle operations built on the switch engine."""

from .fresh_profile import FreshProfilePreparer
from .snapshot_export import SnapshotExporter

__all__ = ["FreshProfilePreparer", "SnapshotExporter"]
