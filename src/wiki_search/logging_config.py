"""Logging setup for the wiki_search package."""

from __future__ import annotations

import logging

LOGGER_NAME = "wiki_search"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Safe to call more than once: the handler is only added the first time,
    later calls just change the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level if isinstance(level, int) else level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
