"""Tests for logging configuration."""

import logging

from nutrilog.app_logging import LOGGER_NAME, configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG


def test_module_loggers_inherit_package_handler() -> None:
    configure_logging()

    module_logger = logging.getLogger("nutrilog.services.meals")

    assert module_logger.getEffectiveLevel() == logging.INFO
    assert not logging.getLogger(LOGGER_NAME).propagate
