"""Defines the :class:`.Logger` class and the package-level logging helpers."""

from __future__ import annotations

# Standard Library Imports
import logging
import sys
from logging.handlers import RotatingFileHandler
from os import makedirs
from os.path import exists, join

# Local Imports
from . import pathSafeTime
from .behavioral_config import BehavioralConfig

LOGGER_NAME: str = "gravfield"
"""``str``: name of the top-level logger every gravity field message is recorded under."""


class Logger:
    """Extended logger wraps the standard Python logging package.

    It also creates a standard file name and log format for any log files that are saved.
    """

    def __init__(self, name, level=None, path=None, allow_multiple_handlers=None):
        """Configure the logging information for this Logger instance.

        Args:
            name (``string``): Name of the the logger instance
            level (``logging.LOG_LEVEL``): Determines what level of log messages are published
            path (``string``): Path to where the log file will be stored
            allow_multiple_handlers (``bool``, optional): whether multiple log handlers are permitted
        """
        config = BehavioralConfig.getConfig().logging
        if not level:
            level = config.Level
        if not path:
            path = config.OutputLocation
        if not allow_multiple_handlers:
            allow_multiple_handlers = config.AllowMultipleHandlers

        self.filename = None
        self.logger = logging.getLogger(name)
        if not self.logger.handlers or allow_multiple_handlers is True:
            if path == "stdout":
                self.filename = "stdout"
                handler = logging.StreamHandler(sys.stdout)

            else:
                if not exists(path):
                    self.logger.info(f"Path did not exist: {path!r}. Creating path...")
                    makedirs(path)

                self.filename = join(path, f"{name}_{pathSafeTime()}.log")
                handler = RotatingFileHandler(
                    self.filename,
                    maxBytes=config.MaxFileSize,
                    backupCount=config.MaxFileCount,
                )

            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(module)s - %(levelname)s - %(message)s"),
            )
            self.logger.setLevel(level)
            self.logger.addHandler(handler)

    def __getattr__(self, name):
        """Forward everything else to the wrapped :class:`logging.Logger`."""
        return getattr(self.logger, name)


def _gravfieldLog(message: str, level: int):
    """Log a message to the top-level ``gravfield`` log record.

    Readers, providers and the factory use this one-liner so they never need to hold a logger.

    Args:
        message (``str``): message to record with in the log.
        level (``int``): level at which to log this message, corresponding to `logging.LOG_LEVEL`.
    """
    logging.getLogger(LOGGER_NAME).log(msg=message, level=level)


def gravfieldLogError(message: str):
    """Log an ERROR message to the top-level log record."""
    _gravfieldLog(message, level=logging.ERROR)


def gravfieldLogWarning(message: str):
    """Log a WARNING message to the top-level log record."""
    _gravfieldLog(message, level=logging.WARNING)


def gravfieldLogInfo(message: str):
    """Log an INFO message to the top-level log record."""
    _gravfieldLog(message, level=logging.INFO)


def gravfieldLogDebug(message: str):
    """Log a DEBUG message to the top-level log record."""
    _gravfieldLog(message, level=logging.DEBUG)
