"""Capability interfaces the trove requires of external collaborators."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Handle returned by a signal subscription."""

    def Disconnect(self) -> None:  # noqa: N802
        """Stop delivering the signal to the subscribed handler."""
        ...


class SignalSource(Protocol):
    """Anything that accepts a handler and returns a connection."""

    def connect(self, handler: Callable[..., Any]) -> Connection:
        """Subscribe a handler."""
        ...


class SignalConnector(Protocol):
    """Subscription primitive injected into a trove."""

    def __call__(self, signal: SignalSource, handler: Callable[..., Any]) -> Connection: ...


class TaskCanceller(Protocol):
    """Recognizes and cancels cooperative task handles."""

    def is_task(self, obj: Any) -> bool:
        """Return True when obj is a task handle this canceller owns."""
        ...

    def cancel(self, task: Any) -> None:
        """Request cancellation of a task."""
        ...


@runtime_checkable
class PendingOperation(Protocol):
    """Future-like asynchronous computation.

    Both asyncio.Future and concurrent.futures.Future satisfy this protocol.
    """

    def done(self) -> bool: ...

    def cancel(self) -> bool: ...

    def add_done_callback(self, fn: Callable[[Any], Any]) -> None: ...


class Clonable(Protocol):
    """Object able to produce an independent duplicate of itself."""

    def clone(self) -> Any: ...


class HostObject(Protocol):
    """Host-tree object whose destruction can end a trove's lifetime."""

    destroying: SignalSource

    def is_descendant_of(self, ancestor: Any) -> bool: ...
