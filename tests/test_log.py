# tests/test_log.py
import logging

import pytest

from sqlrunner.config import log_file_path
from sqlrunner.log import APP_LOGGER, configure_logging, log_to_file


@pytest.fixture
def app_logger():
    logger = logging.getLogger(APP_LOGGER)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def _console_handlers(logger):
    return [h for h in logger.handlers if getattr(h, "sqlrunner_console", False)]


def test_configure_twice_keeps_one_console_handler(app_logger):
    configure_logging()
    configure_logging(verbose=True)

    assert len(_console_handlers(app_logger)) == 1
    assert app_logger.level == logging.DEBUG


def test_default_level_is_info(app_logger):
    configure_logging()
    assert app_logger.level == logging.INFO
    assert logging.getLogger("PyQt6").level == logging.WARNING


def test_log_file_sits_next_to_history(app_logger, tmp_path):
    path = log_file_path(tmp_path)
    path.parent.mkdir(parents=True)
    configure_logging()

    handler = log_to_file(path)
    logging.getLogger("sqlrunner.executor").info("SQLite query returned 3 row(s)")
    handler.flush()

    assert path == tmp_path / "SqlRuner" / "sqlrunner.log"
    assert "| INFO | sqlrunner.executor | SQLite query returned 3 row(s)" in path.read_text(encoding="utf-8")


def test_unwritable_log_file_is_skipped(app_logger, tmp_path):
    assert log_to_file(tmp_path / "missing" / "sqlrunner.log") is None
