"""Shared fixtures for the analytics test suite."""

import logging

import pytest

from analytics_framework.core.logging_config import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_framework_logger():
    """Undo setup_logging() so handlers never outlive the stream they wrap."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def skewed_rows():
    """One numeric column with a single high outlier."""
    return [{"x": 1}, {"x": 2}, {"x": 3}, {"x": 4}, {"x": 100}]


@pytest.fixture
def linear_rows():
    """Two perfectly correlated columns with a steady upward trend."""
    return [{"x": i, "y": 2 * i} for i in range(1, 11)]


@pytest.fixture
def mixed_rows():
    """Numeric and text columns side by side."""
    return [
        {"name": "alice", "age": 30, "city": "Leeds"},
        {"name": "bob", "age": "41", "city": "York"},
        {"name": "carol", "age": 25, "city": None},
        {"name": "dave", "age": 38, "city": "Hull"},
    ]
