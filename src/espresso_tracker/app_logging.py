"""Logging configuration helpers."""

import logging

APP_LOGGER_NAME = "espresso_tracker"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the app logger and set its level.

    Safe to call repeatedly: later calls only update the level.
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
