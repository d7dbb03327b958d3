"""Pytest configuration and fixtures for trove unit tests."""

import logging
import os
from collections.abc import Generator

import pytest

from tests.fakes import RecordingCanceller
from trove import DataModel, Trove


@pytest.fixture(autouse=True)
def cleanup_config_env() -> Generator[None, None, None]:
    """Ensure TROVE_CONFIG is not set for unit tests.

    Yields
    ------
    None
        Control back to test after ensuring clean environment
    """
    original = os.environ.pop("TROVE_CONFIG", None)

    yield

    if original is not None:
        os.environ["TROVE_CONFIG"] = original
    else:
        os.environ.pop("TROVE_CONFIG", None)


@pytest.fixture
def trove() -> Generator[Trove, None, None]:
    """Provide a propagate-policy trove that is cleaned after the test.

    Yields
    ------
    Trove
        Fresh trove
    """
    instance = Trove(name="test")

    yield instance

    instance.clean()


@pytest.fixture
def canceller() -> RecordingCanceller:
    """Provide a task canceller that records cancellations."""
    return RecordingCanceller()


@pytest.fixture
def root() -> DataModel:
    """Provide an isolated hierarchy root."""
    return DataModel(name="test-game")


@pytest.fixture
def trove_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture DEBUG records from the trove package."""
    caplog.set_level(logging.DEBUG, logger="trove")
    return caplog


@pytest.fixture
def restore_trove_logger() -> Generator[None, None, None]:
    """Restore handlers and level of the trove logger after a test."""
    package_logger = logging.getLogger("trove")
    handlers = list(package_logger.handlers)
    level = package_logger.level

    yield

    package_logger.handlers = handlers
    package_logger.setLevel(level)
