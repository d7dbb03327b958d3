"""Logging setup for the trove package."""

from __future__ import annotations

import logging
from typing import IO

from trove.constants import DEFAULT_LOG_LEVEL
from trove.logging.formatters import TroveFormatter

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: str | int = DEFAULT_LOG_LEVEL, stream: IO[str] | None = None
) -> logging.Handler:
    """Attach a TroveFormatter stream handler to the ``trove`` logger.

    Calling it again replaces the handler installed by the previous call.

    Parameters
    ----------
    level : str | int
        Level name or number for the ``trove`` logger
    stream : IO[str] | None
        Destination stream (default: sys.stderr)

    Returns
    -------
    logging.Handler
        The installed handler
    """
    package_logger = logging.getLogger("trove")

    for handler in list(package_logger.handlers):
        if isinstance(handler.formatter, TroveFormatter):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(TroveFormatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler


__all__ = ["LOG_FORMAT", "TroveFormatter", "configure_logging"]
