"""
Pytest configuration and shared fixtures.

This module provides common fixtures for the Carousell Watch test suite.
"""

import logging

import pytest

from carousell_watch.models.alert import Alert
from carousell_watch.models.config import Configuration
from carousell_watch.models.rule import Rule
from carousell_watch.utils import logging as watch_logging
from carousell_watch.utils.error_handling import SourceRenderError, get_error_tracker
from carousell_watch.utils.logging import ROOT_LOGGER_NAME
from tests.fakes import OTHER_SEARCH_URL, SEARCH_URL, FakeRenderer, listing_page, simple_card


@pytest.fixture(autouse=True)
def reset_error_tracker():
    """Keep the global error tracker isolated between tests."""
    get_error_tracker().clear()
    yield
    get_error_tracker().clear()


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore the package logger and the global logging manager."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = root_logger.level
    handlers = list(root_logger.handlers)
    manager = watch_logging._logging_manager
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    watch_logging._logging_manager = manager


@pytest.fixture
def car_page():
    """Search page with a red and a blue car."""
    return listing_page(simple_card("/p/u1", "red car"), simple_card("/p/u2", "blue car"))


@pytest.fixture
def red_alert():
    """Alert matching red listings on one source."""
    return Alert(
        id="A",
        sources=[SEARCH_URL],
        match=Rule.contains("red"),
        emails=["buyer@example.com"],
    )


@pytest.fixture
def fake_renderer(car_page):
    return FakeRenderer({SEARCH_URL: car_page})


@pytest.fixture
def render_timeout():
    return SourceRenderError(OTHER_SEARCH_URL, "Timeout 60000ms exceeded")


@pytest.fixture
def sample_configuration(red_alert, tmp_path):
    """Configuration with one alert and a temporary state file."""
    return Configuration(alerts=[red_alert], state_path=str(tmp_path / "seen.json"))
