"""Application constants and the on-disk location of the history database."""

from pathlib import Path

APP_NAME = "SqlRunner"
APP_DIR_NAME = "SqlRuner"
HISTORY_FILE_NAME = "history.db"
LOG_FILE_NAME = "sqlrunner.log"
DEFAULT_PAGE_SIZE = 10


def history_db_path(data_root):
    """Return the history database path below a writable data root."""
    return Path(data_root) / APP_DIR_NAME / HISTORY_FILE_NAME


def log_file_path(data_root):
    """Return the log file path, kept beside the history database."""
    return Path(data_root) / APP_DIR_NAME / LOG_FILE_NAME
