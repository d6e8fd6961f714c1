"""Logging setup for the command line.

Library modules only create loggers; handlers are installed here,
once per invocation, on the ``dirpurge`` logger.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from dirpurge.utils.formatting import err_console

LOGGER_NAME = "dirpurge"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    log_file: Path | None = None,
    *,
    verbose: bool = False,
    quiet: bool = False,
) -> logging.Logger:
    """Install console and optional file handlers.

    The console handler writes to stderr: DEBUG with verbose, ERROR with
    quiet, WARNING otherwise. The file handler records DEBUG with verbose
    and INFO otherwise.

    Args:
        log_file: File to write the log to.
        verbose: Enable debug output.
        quiet: Only show errors on the console.

    Returns:
        The configured package logger.

    Raises:
        OSError: If the log file cannot be created.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING

    console_handler = RichHandler(console=err_console, show_time=False, show_path=False)
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
