from __future__ import annotations

from pathlib import Path

from heat_save_manager.domain.models import SwitchResult
from heat_save_manager.utils.status import ErrorKind


class SaveManagerError(RuntimeError):
    """Base error for profile store, marker and engine failures.

    Carries a machine-readable ``kind`` and the underlying ``cause`` so a
    front end can render its own status text.
    """

    kind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(SaveManagerError):
    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(SaveManagerError):
    kind = ErrorKind.ALREADY_EXISTS


class InvalidNameError(SaveManagerError):
    kind = ErrorKind.INVALID_NAME


class ActiveProfileGuardError(SaveManagerError):
    kind = ErrorKind.ACTIVE_PROFILE_GUARD


class BusyError(SaveManagerError):
    kind = ErrorKind.BUSY


class GameRunningError(SaveManagerError):
    kind = ErrorKind.GAME_RUNNING


class InvalidPathError(SaveManagerError):
    kind = ErrorKind.INVALID_PATH


class IOFailureError(SaveManagerError):
    """A mutating operation failed.

    ``result.rolled_back`` tells whether the target directory was restored
    to its pre-operation contents.
    """

    kind = ErrorKind.IO_FAILURE

    def __init__(
        self,
        message: str,
        *,
        result: SwitchResult | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.result = result

    @property
    def rolled_back(self) -> bool:
        return self.result is not None and self.result.rolled_back


class RollbackFailureError(IOFailureError):
    """Restoring the backup failed; the target may be in a mixed state."""

    kind = ErrorKind.ROLLBACK_FAILURE

    def __init__(
        self,
        message: str,
        *,
        result: SwitchResult,
        backup_path: Path | None,
        cause: BaseException | None = None,
        rollback_cause: BaseException | None = None,
    ):
        super().__init__(message, result=result, cause=cause)
        self.backup_path = backup_path
        self.rollback_cause = rollback_cause
