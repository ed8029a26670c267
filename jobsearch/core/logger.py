"""
Logging setup.

Call setup_logging() once at startup; modules get their logger with
get_logger(__name__).
"""

import logging
import sys

from jobsearch.core.config import Settings

ROOT_LOGGER = "jobsearch"


def setup_logging(settings: Settings) -> logging.Logger:
    """Attach a console handler to the package logger using configured level/format."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=settings.log_format, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
