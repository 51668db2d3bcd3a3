"""Tests for logging configuration."""

import logging

from espresso_tracker.app_logging import APP_LOGGER_NAME, configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.INFO


def test_configure_logging_updates_level() -> None:
    logging.getLogger(APP_LOGGER_NAME).handlers.clear()

    logger = configure_logging("debug")

    assert logger.name == APP_LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    configure_logging()
    assert logger.level == logging.INFO
