from __future__ import annotations

import logging

from heat_save_manager.core.errors import InvalidNameError, SaveManagerError
from heat_save_manager.core.profiles.naming import validate_profile_name
from heat_save_manager.core.switching.switch_engine import SwitchEngine
from heat_save_manager.domain.models import Profile

log = logging.getLogger(__name__)


class SnapshotExporter:
    """Copies the live save root into a profile directory."""

    def __init__(self, engine: SwitchEngine):
        self.engine = engine

    def resolve_target(self, target_name: str | None = None) -> str:
        """
        Pick the export target: the explicit name, else the active profile.

        Raises:
            InvalidNameError: if neither names a profile
        """
        explicit = (target_name or "").strip()
        if explicit:
            return validate_profile_name(explicit)
        active = self.engine.marker.read()
        if not active:
            raise InvalidNameError("No profile name given and no active profile set")
        return validate_profile_name(active)

    def export_current(self, target_name: str | None = None) -> Profile:
        """
        Overwrite (or create) a profile with the live save root's contents.

        Args:
            target_name: Profile to write; defaults to the active profile

        Returns:
            The written profile
        """
        name = self.resolve_target(target_name)
        engine = self.engine

        with engine.exclusive("export"):
            profile_dir = engine.store.profile_path(name)
            created = not profile_dir.exists()
            live_reserved = engine.reserved_entries()
            log.info("Exporting live save root into profile %s", name)
            try:
                engine.replace_directory(
                    profile_dir,
                    lambda target: engine.file_ops.copy_entries(
                        engine.paths.save_game_path, target, live_reserved
                    ),
                    label=name,
                )
            except SaveManagerError:
                if created:
                    try:
                        engine.file_ops.remove_tree(profile_dir)
                    except OSError as e:
                        log.warning("Could not remove partial profile %s: %s", name, e)
                raise
        return Profile(name, profile_dir)
