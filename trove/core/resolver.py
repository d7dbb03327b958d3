"""Disposal action resolution.

A resource is classified once, when it is registered, into one of three
disposal actions. Resolution is pure: it inspects the resource and returns a
value, it never touches registry state.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from trove.constants import ASYNC_CANCEL_METHOD, CAPABILITY_PROBE_ORDER
from trove.core.interfaces import TaskCanceller
from trove.exceptions import UnsupportedResourceError


@dataclass(frozen=True)
class InvokeDirectly:
    """Dispose a callable resource by calling it with no arguments."""

    def perform(self, resource: Any, canceller: TaskCanceller) -> None:
        resource()


@dataclass(frozen=True)
class CancelCooperativeTask:
    """Dispose a cooperative task handle by cancelling it."""

    def perform(self, resource: Any, canceller: TaskCanceller) -> None:
        canceller.cancel(resource)


@dataclass(frozen=True)
class InvokeNamedCapability:
    """Dispose a resource by calling one of its methods.

    Attributes
    ----------
    name : str
        Attribute name of the method to call.
    """

    name: str

    def perform(self, resource: Any, canceller: TaskCanceller) -> None:
        getattr(resource, self.name)()


@dataclass(frozen=True)
class CancelPendingOperation:
    """Dispose a pending operation by cancelling it, unless it already finished.

    An asyncio future runs its done callbacks on a later loop iteration, so
    it may still be tracked after it completes.
    """

    def perform(self, resource: Any, canceller: TaskCanceller) -> None:
        if resource.done():
            return
        getattr(resource, ASYNC_CANCEL_METHOD)()


DisposalAction = (
    InvokeDirectly | CancelCooperativeTask | InvokeNamedCapability | CancelPendingOperation
)


def is_cooperative_task(obj: Any) -> bool:
    """Return True for generator and coroutine objects.

    Parameters
    ----------
    obj : Any
        Object to classify

    Returns
    -------
    bool
        Whether obj is a suspended unit of cooperative execution
    """
    return inspect.isgenerator(obj) or inspect.iscoroutine(obj)


def resolve_disposal(
    resource: Any,
    method: str | None = None,
    is_task: Callable[[Any], bool] = is_cooperative_task,
) -> DisposalAction:
    """Resolve the disposal action for a resource.

    Parameters
    ----------
    resource : Any
        Resource being registered
    method : str | None
        Explicit capability name chosen by the caller. Ignored for callables
        and task handles, not validated otherwise.
    is_task : Callable[[Any], bool]
        Predicate recognizing cooperative task handles

    Returns
    -------
    DisposalAction
        Action that releases the resource

    Raises
    ------
    UnsupportedResourceError
        If the resource is not callable, not a task and exposes none of the
        probed capabilities
    """
    if callable(resource):
        return InvokeDirectly()

    if is_task(resource):
        return CancelCooperativeTask()

    if method is not None:
        return InvokeNamedCapability(method)

    for name in CAPABILITY_PROBE_ORDER:
        if callable(getattr(resource, name, None)):
            return InvokeNamedCapability(name)

    raise UnsupportedResourceError(resource)
