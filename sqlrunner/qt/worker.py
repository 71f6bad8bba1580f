"""
Background worker for SqlRunner actions.

Each action (test, execute, purge) runs on one QThread so the window stays
responsive; the main window disables the triggering controls meanwhile.
"""

from typing import Any, Callable
from PyQt6.QtCore import QThread, pyqtSignal


class TaskWorker(QThread):
    """Runs one callable off the GUI thread and reports its outcome."""

    succeeded = pyqtSignal(object)
    failed = pyqtSignal(object)  # the exception instance

    def __init__(self, task: Callable[[], Any]):
        super().__init__()
        self._task = task

    def run(self) -> None:
        """Run the task and emit its result or the exception it raised."""
        try:
            result = self._task()
        except Exception as e:
            self.failed.emit(e)
        else:
            self.succeeded.emit(result)
