"""Logging setup for the services."""

import logging
from typing import List, Optional, Tuple

from textscanner.config import Settings

LOGGER_NAME = "textscanner"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (level, log file) the handlers were last built for
_active: Optional[Tuple[int, str]] = None


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Attach stderr (and optional file) handlers to the ``textscanner`` logger.

    Both services call this from ``create_app``; a call with the same level and log
    file as the previous one keeps the existing handlers.
    """
    global _active
    logger = logging.getLogger(LOGGER_NAME)
    wanted = (_level(settings.log_level), settings.log_file.strip())
    if wanted == _active and logger.handlers:
        return logger

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    level, log_file = wanted
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            file_error = e

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    _active = wanted

    if file_error is not None:
        logger.warning("Could not open log file %s: %s", log_file, file_error)
    elif log_file:
        logger.info("Logging to file %s", log_file)
    return logger
