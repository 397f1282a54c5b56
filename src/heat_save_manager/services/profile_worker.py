import logging
from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QThread, Signal

from heat_save_manager.core.errors import SaveManagerError

log = logging.getLogger(__name__)


class ProfileOperationWorker(QThread):
    """
    Runs one blocking save-manager call off the GUI thread.
    Emits the call's return value, or the SaveManagerError it raised.
    """

    finished_signal = Signal(object)  # return value of the operation
    failed_signal = Signal(object)  # SaveManagerError

    def __init__(self, operation: Callable[..., Any], *args: Any, parent=None):
        super().__init__(parent)
        self.operation = operation
        self.args = args

    def run(self):
        try:
            result = self.operation(*self.args)
        except SaveManagerError as e:
            log.warning("Profile operation failed (%s): %s", e.kind, e)
            self.failed_signal.emit(e)
            return
        self.finished_signal.emit(result)
