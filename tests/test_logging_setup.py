from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from stats_dashboard.config import LoggingSettings
from stats_dashboard.logging_setup import ROOT_LOGGER, configure_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_console_only_by_default(restore_logger) -> None:
    logger = configure_logging()
    assert logger is restore_logger
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_rotating_file_handler(tmp_path: Path, restore_logger) -> None:
    log_file = tmp_path / "logs" / "dashboard.log"
    settings = LoggingSettings(level="debug", log_file=str(log_file), max_bytes=1024, backup_count=2)
    logger = configure_logging(settings)

    file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 1024
    assert file_handlers[0].backupCount == 2
    assert logger.level == logging.DEBUG

    logging.getLogger("stats_dashboard.analyzers.aggregator").warning("window empty")
    for handler in logger.handlers:
        handler.flush()
    assert "[WARNING] stats_dashboard.analyzers.aggregator: window empty" in log_file.read_text()


def test_reconfiguring_does_not_duplicate_handlers(restore_logger) -> None:
    configure_logging()
    configure_logging()
    assert len(restore_logger.handlers) == 1
