"""Unit tests for logging configuration."""

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from keelcast.models.config import LoggingConfig
from keelcast.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Restore the default loguru handler after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogging:
    """Test setup_logging function."""

    def test_file_sink(self, tmp_path: Path) -> None:
        """Test messages reach the configured log file."""
        log_file = tmp_path / "logs" / "keelcast.log"
        setup_logging(LoggingConfig(level="DEBUG", colorize=False, file_path=str(log_file)))

        logger.info("Feed ingested")
        logger.complete()

        assert log_file.parent.exists()
        assert "Feed ingested" in log_file.read_text()

    def test_level_filters_file(self, tmp_path: Path) -> None:
        """Test records below the configured level are dropped."""
        log_file = tmp_path / "keelcast.log"
        setup_logging(LoggingConfig(level="WARNING", colorize=False, file_path=str(log_file)))

        logger.info("quiet")
        logger.warning("loud")
        logger.complete()

        content = log_file.read_text()
        assert "loud" in content
        assert "quiet" not in content

    def test_aiohttp_warnings_forwarded(self, tmp_path: Path) -> None:
        """Test standard library records from aiohttp reach loguru."""
        log_file = tmp_path / "keelcast.log"
        setup_logging(LoggingConfig(level="DEBUG", colorize=False, file_path=str(log_file)))

        logging.getLogger("aiohttp.client").warning("Unclosed client session")
        logger.complete()

        assert "Unclosed client session" in log_file.read_text()

    def test_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test no log directory is created when file logging is off."""
        monkeypatch.chdir(tmp_path)

        setup_logging(LoggingConfig(file_path=None, colorize=False))

        assert not (tmp_path / "logs").exists()
