"""Core trove functionality."""

from __future__ import annotations

from trove.core.resolver import (
    CancelCooperativeTask,
    CancelPendingOperation,
    DisposalAction,
    InvokeDirectly,
    InvokeNamedCapability,
    is_cooperative_task,
    resolve_disposal,
)
from trove.core.registry import TrackEntry, Trove
from trove.core.config import ConfigLoader
from trove.core.strategies import CollectFailures, PropagateFailures, get_strategy

__all__ = [
    "CancelCooperativeTask",
    "CancelPendingOperation",
    "CollectFailures",
    "ConfigLoader",
    "DisposalAction",
    "InvokeDirectly",
    "InvokeNamedCapability",
    "PropagateFailures",
    "TrackEntry",
    "Trove",
    "get_strategy",
    "is_cooperative_task",
    "resolve_disposal",
]
