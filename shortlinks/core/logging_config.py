"""
Logging Configuration

Configures the ``shortlinks`` logger hierarchy: a console handler and,
when a file path is configured, a rotating file handler for the request log.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "shortlinks"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    file_path: Optional[str] = None,
    max_bytes: int = 1_000_000,
    backups: int = 3,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
        file_path: Optional path of the request log file; its folder is created
        max_bytes: Rotation threshold for the file handler
        backups: Number of rotated files to keep

    Returns:
        The configured ``shortlinks`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers when called more than once (tests, reloads)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            file_path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
