from __future__ import annotations

import logging

from heat_save_manager.core.errors import AlreadyExistsError, SaveManagerError
from heat_save_manager.core.profiles.naming import validate_profile_name
from heat_save_manager.core.switching.switch_engine import SwitchEngine
from heat_save_manager.domain.models import SwitchResult

log = logging.getLogger(__name__)


class FreshProfilePreparer:
    """
    Starts a new profile from an empty live save root.
    The profile directory stays empty until the next export fills it.
    """

    def __init__(self, engine: SwitchEngine):
        self.engine = engine

    def prepare_fresh(self, profile_name: str) -> SwitchResult:
        name = validate_profile_name(profile_name)
        store = self.engine.store
        if store.exists(name):
            raise AlreadyExistsError(f"Profile already exists: {name}")

        with self.engine.exclusive("prepare fresh"):
            profile = store.create(name)
            log.info("Preparing fresh live save root for profile %s", name)
            try:
                return self.engine.replace_directory(
                    self.engine.paths.save_game_path,
                    lambda target: None,
                    label=name,
                    reserved=self.engine.reserved_entries(),
                    commit=lambda: self.engine.marker.write(name),
                )
            except SaveManagerError:
                # Live root is restored (or reported unsafe); drop the unused profile
                try:
                    self.engine.file_ops.remove_tree(profile.path)
                except OSError as e:
                    log.warning("Could not remove profile %s: %s", name, e)
                raise
