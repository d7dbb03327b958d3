"""Global constants for the trove package.

This module contains values shared by the resolver, the registry and the
configuration loader.
"""

from enum import Enum

CAPABILITY_PROBE_ORDER = ("Destroy", "Disconnect", "destroy", "disconnect")
"""Capability names probed, in priority order, when no method is given.

The first attribute present and callable on a resource becomes its disposal
capability. PascalCase names come first to match host-engine objects.
"""

ASYNC_CANCEL_METHOD = "cancel"
"""Capability invoked to dispose a pending asynchronous operation."""

DEFAULT_CONFIG_PATH = "trove.yaml"
"""Configuration file used when neither a path nor TROVE_CONFIG is given."""

CONFIG_ENV_VAR = "TROVE_CONFIG"
"""Environment variable naming the configuration file."""

DEFAULT_LOG_LEVEL = "WARNING"
"""Log level applied by configure_logging when none is configured."""


class FailurePolicy(Enum):
    """How a bulk clean reacts to a disposal action that raises."""

    PROPAGATE = "propagate"
    COLLECT = "collect"


class TroveState(Enum):
    """Lifecycle state of a trove."""

    ACTIVE = "active"
    CLEANING = "cleaning"
    DISPOSED = "disposed"
