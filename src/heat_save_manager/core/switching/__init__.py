"""Live save root switching module for Heat Save Manager."""

from .backup import (
    STRATEGY_AUTO,
    STRATEGY_COPY,
    STRATEGY_NAMES,
    STRATEGY_RENAME,
    CopyBackupStrategy,
    RenameBackupStrategy,
)
from .file_ops import FileOps, ReservedEntries
from .switch_engine import SwitchEngine

__all__ = [
    "SwitchEngine",
    "FileOps",
    "ReservedEntries",
    "CopyBackupStrategy",
    "RenameBackupStrategy",
    "STRATEGY_AUTO",
    "STRATEGY_COPY",
    "STRATEGY_RENAME",
    "STRATEGY_NAMES",
]
