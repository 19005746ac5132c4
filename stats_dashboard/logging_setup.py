"""
Logging setup for the dashboard.

Console output always; a rotating log file when ``log_file`` is configured.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from stats_dashboard.config import LoggingSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "stats_dashboard"


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Configure the package logger.

    Safe to call on every Streamlit rerun: existing handlers are replaced,
    not duplicated.

    Args:
        settings: Level, optional log file and rotation limits.

    Returns:
        The configured package logger.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, str(settings.level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # Rotating file handler: keep backup_count files of max_bytes each
        file_handler = RotatingFileHandler(
            str(log_path),
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
