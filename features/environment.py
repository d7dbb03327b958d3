"""Behave environment configuration for trove scenarios."""

import logging

from behave.model import Scenario
from behave.runner import Context

from trove import DataModel, TaskScheduler

logger = logging.getLogger(__name__)


class LogCapture(logging.Handler):
    """Custom logging handler for capturing log records in tests."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Give every scenario its own hierarchy root and scheduler, and capture trove logs."""
    context.root = DataModel(name="scenario-game")
    context.scheduler = TaskScheduler()
    context.instances = {}
    context.troves = {}
    context.disposed = []

    context.log_capture = LogCapture()
    trove_logger = logging.getLogger("trove")
    trove_logger.addHandler(context.log_capture)
    trove_logger.setLevel(logging.DEBUG)
    logger.debug("Starting scenario: %s", scenario.name)


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Clean every trove the scenario created and detach the log capture."""
    for name, trove in context.troves.items():
        try:
            trove.clean()
        except Exception as e:
            logger.warning("Cleanup of trove %s failed after scenario: %s", name, e)

    logging.getLogger("trove").removeHandler(context.log_capture)
