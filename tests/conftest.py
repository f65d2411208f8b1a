"""Shared pytest configuration."""

import logging

import pytest

from rankrel.logs import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _detach_package_log_handler():
    """Drop the stderr handler a CLI test may have installed."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
