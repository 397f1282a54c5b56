from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class AppPaths:
    save_game_path: Path
    profiles_path: Path

    def marker_dir(self) -> Path:
        return self.profiles_path.parent


@dataclass(frozen=True)
class Profile:
    name: str
    path: Path


@dataclass(frozen=True)
class SwitchResult:
    profile_name: str
    switched_at: datetime
    rolled_back: bool = False
