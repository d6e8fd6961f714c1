"""Unit tests for logging setup."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from dirpurge.utils.log import LOGGER_NAME, configure_logging
from rich.logging import RichHandler


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    """Remove handlers installed by a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_levels(self) -> None:
        """verbose shows debug, quiet only errors, default warnings."""
        cases = (
            ({"verbose": True}, logging.DEBUG),
            ({"quiet": True}, logging.ERROR),
            ({}, logging.WARNING),
        )
        for kwargs, level in cases:
            logger = configure_logging(**kwargs)
            handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
            assert len(handlers) == 1
            assert handlers[0].level == level

    def test_file_handler_writes_records(self, tmp_path: Path) -> None:
        """Module loggers below the package write to the log file."""
        log_file = tmp_path / "run.log"
        configure_logging(log_file)

        logging.getLogger("dirpurge.filesystem.operator").info("Moved to trash: /x")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()

        text = log_file.read_text()
        assert "INFO dirpurge.filesystem.operator: Moved to trash: /x" in text

    def test_file_handler_skips_debug_unless_verbose(self, tmp_path: Path) -> None:
        """Debug records reach the file only in verbose mode."""
        log_file = tmp_path / "run.log"
        configure_logging(log_file)

        logging.getLogger("dirpurge.filesystem.scanner").debug("Excluding directory: /x")

        assert "Excluding" not in log_file.read_text()

    def test_unwritable_log_file(self, tmp_path: Path) -> None:
        """A log file that cannot be created raises OSError."""
        with pytest.raises(OSError):
            configure_logging(tmp_path / "missing" / "run.log")

    def test_reconfigure_replaces_handlers(self) -> None:
        """Calling twice does not duplicate handlers."""
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1
        assert logger.propagate is False
