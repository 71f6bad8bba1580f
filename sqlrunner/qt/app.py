"""
Application bootstrap: QApplication, history store, and the main window.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from PyQt6.QtCore import QStandardPaths
from PyQt6.QtWidgets import QApplication, QMessageBox

from .main_window import MainWindow
from .theme import Theme
from ..config import APP_NAME, history_db_path, log_file_path
from ..database import HistoryStore
from ..errors import StorageFailure
from ..log import log_to_file
from ..runner import SqlRunner

logger = logging.getLogger(__name__)


def default_data_root() -> Path:
    """Per-user writable data directory provided by the platform."""
    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.GenericDataLocation
    )
    return Path(location) if location else Path.home()


def main(data_dir: Optional[str] = None) -> int:
    """Start the GUI and return the exit code."""
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    Theme.load()
    Theme.apply(app)

    data_root = data_dir or default_data_root()
    db_path = history_db_path(data_root)
    logger.info("Using history database %s", db_path)
    try:
        store = HistoryStore(db_path)
    except StorageFailure as e:
        QMessageBox.critical(None, "SqlRunner", str(e))
        return 1
    log_to_file(log_file_path(data_root))

    window = MainWindow(SqlRunner(store))
    window.show()
    return app.exec()
