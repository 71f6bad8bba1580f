"""Logging for the sqlrunner package.

Console output goes to stderr so it never mixes with ``--help`` text. Once
the data directory is known, ``log_to_file`` adds a small rotating log next
to the history database.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

APP_LOGGER = "sqlrunner"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BYTES = 512 * 1024
LOG_FILE_BACKUPS = 2

# Libraries that log through the logging module; only their problems matter here
QUIET_LOGGERS = {"PyQt6": logging.WARNING, "asyncio": logging.WARNING}


def _formatter():
    return logging.Formatter(LOG_FORMAT, DATE_FORMAT)


def configure_logging(verbose=False):
    """Attach a console handler to the package logger and return it.

    Calling it again replaces the previous console handler instead of
    adding a second one.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(logger.handlers):
        if getattr(handler, "sqlrunner_console", False):
            logger.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter())
    console.sqlrunner_console = True
    logger.addHandler(console)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logger.debug("Logging configured at %s", logging.getLevelName(logger.level))
    return logger


def log_to_file(path):
    """Also write the package log to ``path``; returns the handler or None.

    A log file that cannot be opened is reported on the console and
    otherwise ignored.
    """
    logger = logging.getLogger(APP_LOGGER)
    try:
        handler = RotatingFileHandler(
            path, maxBytes=LOG_FILE_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
    except OSError as e:
        logger.warning("Cannot write log file %s: %s", path, e)
        return None
    handler.setFormatter(_formatter())
    logger.addHandler(handler)
    return handler
