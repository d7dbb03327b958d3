"""Trove - track resources and clean them up exactly once."""

from __future__ import annotations

from trove.constants import FailurePolicy, TroveState
from trove.core import (
    CancelCooperativeTask,
    CancelPendingOperation,
    ConfigLoader,
    DisposalAction,
    InvokeDirectly,
    InvokeNamedCapability,
    TrackEntry,
    Trove,
    resolve_disposal,
)
from trove.exceptions import (
    DetachedHostError,
    DisposalError,
    DisposalFailure,
    TroveError,
    UnsupportedResourceError,
)
from trove.hierarchy import DataModel, Instance, game
from trove.scheduler import GeneratorTasks, TaskScheduler
from trove.signals import Connection, Signal

__all__ = [
    "CancelCooperativeTask",
    "CancelPendingOperation",
    "ConfigLoader",
    "Connection",
    "DataModel",
    "DetachedHostError",
    "DisposalAction",
    "DisposalError",
    "DisposalFailure",
    "FailurePolicy",
    "GeneratorTasks",
    "Instance",
    "InvokeDirectly",
    "InvokeNamedCapability",
    "Signal",
    "TaskScheduler",
    "TrackEntry",
    "Trove",
    "TroveError",
    "TroveState",
    "UnsupportedResourceError",
    "game",
    "resolve_disposal",
]
