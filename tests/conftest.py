import logging

import pytest

from py_arctraj.config import reset_config
from py_arctraj.logger import logger

from tests.fixtures_and_helpers import straight_path_points, straight_points

logger.setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the default trajectory config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def line_points():
    return straight_points()


@pytest.fixture
def line_path_points():
    return straight_path_points()
