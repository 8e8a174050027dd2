"""Logging configuration for quantal.

This module provides the package-wide logger. By default, only console logging
is enabled, at the level given by the ``log_level`` setting (see
`quantal.Settings`), but file logging can be enabled for debugging.

Examples
--------
Enable detailed logging to a file while parsing units::

    from quantal.logger import enable_file_logging, disable_file_logging

    enable_file_logging("quantal-debug.log")
    ...
    disable_file_logging()
"""
import logging
from typing import Optional

import quantal

__all__ = ('logger',
           'set_level',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)  # Lowest level for console

LEVEL = quantal.Settings()['log_level'].upper()
"""The configured level of the package logger."""

logger: logging.Logger = logging.getLogger('quantal')
logger.addHandler(console_handler)
logger.setLevel(LEVEL)

# File handler (optional, added dynamically)
file_handler: Optional[logging.FileHandler] = None


def set_level(level: str) -> None:
    """Change the configured level of the package logger.

    While file logging is enabled, the logger stays at DEBUG level and the new
    level takes effect when file logging is disabled.
    """
    global LEVEL
    LEVEL = level.upper()
    if file_handler is None:
        logger.setLevel(LEVEL)


def enable_file_logging(filename: str = "debug.log") -> None:
    """Enable logging to a file with DEBUG level output.

    Any existing file handler will be removed and replaced with a new one
    using the specified filename. The file is opened in append mode.

    Parameters
    ----------
    filename : string, default="debug.log"
        The name of the log file. A relative path is relative to the current
        working directory.
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter("%(asctime)s:%(levelname)s:%(message)s")
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)


def disable_file_logging() -> None:
    """Disable file logging and close the log file.

    It is safe to call this function when file logging is not enabled.
    """
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
        logger.setLevel(LEVEL)
