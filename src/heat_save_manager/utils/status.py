"""
State and error-kind codes used by the profile engine.
Plain string constants so callers can compare and log them without imports
of the exception classes.
"""


class SwitchState:
    """States of the switch engine state machine"""

    IDLE = "idle"
    BACKING_UP = "backing_up"
    REPLACING = "replacing"
    COMMITTING = "committing"
    ROLLING_BACK = "rolling_back"
    FAILED = "failed"

    @classmethod
    def get_name(cls, state: str) -> str:
        """Get state name for debugging"""
        for name, value in cls.__dict__.items():
            if not name.startswith("_") and value == state:
                return name
        return "UNKNOWN"

    @classmethod
    def can_start(cls, state: str) -> bool:
        """Check if a new operation may leave this state"""
        return state in (cls.IDLE, cls.FAILED)


class ErrorKind:
    """Failure kinds surfaced by the store, marker and engine"""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_NAME = "invalid_name"
    ACTIVE_PROFILE_GUARD = "active_profile_guard"
    BUSY = "busy"
    IO_FAILURE = "io_failure"
    ROLLBACK_FAILURE = "rollback_failure"
    GAME_RUNNING = "game_running"
    INVALID_PATH = "invalid_path"

    @classmethod
    def is_data_loss_risk(cls, kind: str) -> bool:
        """Check if the live root may be in neither the old nor the new state"""
        return kind == cls.ROLLBACK_FAILURE
