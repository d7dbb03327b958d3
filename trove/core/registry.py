"""Scoped resource registry with exactly-once disposal."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from trove import hierarchy
from trove.constants import FailurePolicy, TroveState
from trove.core.config import ConfigLoader
from trove.core.interfaces import PendingOperation, SignalConnector, TaskCanceller
from trove.core.resolver import CancelPendingOperation, DisposalAction, resolve_disposal
from trove.core.strategies import get_strategy
from trove.exceptions import DetachedHostError, UnsupportedResourceError
from trove.logging import configure_logging
from trove.scheduler import GeneratorTasks
from trove.signals import connect_signal

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class TrackEntry:
    """A tracked resource paired with the action that releases it.

    Entries compare by identity so that two registrations of the same
    resource stay distinguishable.
    """

    resource: Any
    action: DisposalAction


def _clone_source(source: Any) -> Any:
    return source.clone()


class Trove:
    """Tracks resources and disposes each of them exactly once.

    Resources are disposed individually with remove(), or all together, in
    registration order, with clean() (aliases destroy() and dispose()).

    Every entry is taken out of the registry before its disposal action runs.
    Removal is a single deque operation, so when a bulk clean, a manual
    removal and a future's completion callback race for the same entry only
    one of them obtains it.

    Parameters
    ----------
    name : str | None
        Diagnostic name attached to log records
    failure_policy : FailurePolicy | str
        "propagate" stops a clean at the first failing disposal and re-raises;
        "collect" disposes everything then raises DisposalError
    scheduler : TaskCanceller | None
        Recognizes and cancels cooperative task handles (default: generators
        and coroutines, cancelled by closing them)
    connector : SignalConnector | None
        Subscribes handlers to signal sources (default: signal.connect)
    cloner : Callable[[Any], Any] | None
        Duplicates objects for clone_and_track (default: source.clone())
    root : Any
        Hierarchy root hosts must descend from in attach_to_lifecycle
        (default: trove.hierarchy.game)
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        failure_policy: FailurePolicy | str = FailurePolicy.PROPAGATE,
        scheduler: TaskCanceller | None = None,
        connector: SignalConnector | None = None,
        cloner: Callable[[Any], Any] | None = None,
        root: Any = None,
    ) -> None:
        self.name = name or "trove"
        self._strategy = get_strategy(failure_policy)
        self._scheduler: TaskCanceller = scheduler if scheduler is not None else GeneratorTasks()
        self._connect: SignalConnector = connector if connector is not None else connect_signal
        self._clone = cloner if cloner is not None else _clone_source
        self._root = root
        self._entries: deque[TrackEntry] = deque()
        self._state = TroveState.ACTIVE

    @classmethod
    def from_config(cls, config: dict[str, Any], **collaborators: Any) -> Trove:
        """Build a trove from a loaded configuration section.

        The configured log_level is applied to the ``trove`` logger through
        configure_logging().

        Parameters
        ----------
        config : dict[str, Any]
            Merged trove configuration (see ConfigLoader.get_trove_config).
            Missing keys take the built-in defaults.
        **collaborators : Any
            scheduler, connector, cloner or root overrides

        Returns
        -------
        Trove
            New active trove

        Raises
        ------
        ValueError
            If the configuration is invalid
        """
        loader = ConfigLoader()
        settings = {**loader.BUILT_IN_DEFAULTS, **config}
        loader.validate_config(settings)

        configure_logging(settings["log_level"])
        return cls(
            name=settings["name"],
            failure_policy=settings["failure_policy"],
            **collaborators,
        )

    @property
    def state(self) -> TroveState:
        return self._state

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._strategy.policy

    def add(self, resource: T, method: str | None = None) -> T:
        """Track a resource and return it unchanged.

        Parameters
        ----------
        resource : T
            Callable, cooperative task, or object exposing Destroy,
            Disconnect, destroy or disconnect
        method : str | None
            Name of the method to call on cleanup instead of the probed one.
            Ignored for callables and tasks.

        Returns
        -------
        T
            The same resource

        Raises
        ------
        UnsupportedResourceError
            If no disposal action applies; nothing is registered
        """
        try:
            action = resolve_disposal(resource, method, self._scheduler.is_task)
        except UnsupportedResourceError as e:
            # Drop resolver frames so the traceback ends at the registration call.
            raise e.with_traceback(None) from None

        self._track(resource, action)
        return resource

    def remove(self, resource: Any) -> bool:
        """Untrack the first registration of a resource and dispose it.

        Parameters
        ----------
        resource : Any
            Resource to remove, matched by identity

        Returns
        -------
        bool
            True if a registration was found and disposed
        """
        for entry in list(self._entries):
            if entry.resource is resource and self._discard(entry):
                logger.debug("Removed %s", type(resource).__name__, extra=self._log_extra)
                self._perform(entry)
                return True
        return False

    def connect(self, signal: Any, handler: Callable[..., Any]) -> Any:
        """Subscribe handler to signal and track the connection.

        Returns
        -------
        Any
            Connection handle, disconnected when the trove is cleaned
        """
        return self.add(self._connect(signal, handler))

    def track_async_operation(self, operation: PendingOperation) -> PendingOperation:
        """Track a pending future so it is cancelled on cleanup.

        When the operation completes on its own it is untracked without being
        cancelled. An operation that is already done is returned untracked, and
        one that finished before its done callbacks ran is never cancelled.

        Parameters
        ----------
        operation : PendingOperation
            asyncio or concurrent.futures Future, or anything with done(),
            cancel() and add_done_callback()

        Returns
        -------
        PendingOperation
            The same operation
        """
        if operation.done():
            return operation

        entry = self._track(operation, CancelPendingOperation())
        operation.add_done_callback(lambda _operation: self._forget(entry))
        return operation

    def attach_to_lifecycle(self, host: Any) -> Any:
        """Clean this trove when host is destroyed.

        Parameters
        ----------
        host : Any
            Host object with is_descendant_of() and a destroying signal

        Returns
        -------
        Any
            Tracked connection to host.destroying

        Raises
        ------
        DetachedHostError
            If host is not a descendant of the hierarchy root
        """
        root = self._root if self._root is not None else hierarchy.game
        if not host.is_descendant_of(root):
            raise DetachedHostError(host)
        return self.connect(host.destroying, self._on_host_destroying)

    def clone_and_track(self, source: T) -> T:
        """Duplicate source, track the duplicate and return it."""
        return self.add(self._clone(source))

    def spawn_nested_registry(self) -> Trove:
        """Create a child trove that is cleaned along with this one.

        The child shares this trove's collaborators and failure policy.
        """
        child = Trove(
            name=f"{self.name}.child",
            failure_policy=self._strategy.policy,
            scheduler=self._scheduler,
            connector=self._connect,
            cloner=self._clone,
            root=self._root,
        )
        return self.add(child)

    extend = spawn_nested_registry

    def construct_owned(self, factory: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call factory(*args, **kwargs), track the result and return it."""
        return self.add(factory(*args, **kwargs))

    def bind_to_step(self, scheduler: Any, name: str, callback: Callable[[float], Any]) -> str:
        """Bind a per-step callback on scheduler, unbound on cleanup.

        Parameters
        ----------
        scheduler : Any
            Object with bind_to_step(name, callback) and unbind_from_step(name)
        name : str
            Binding name
        callback : Callable[[float], Any]
            Called with the step delta

        Returns
        -------
        str
            The binding name
        """
        scheduler.bind_to_step(name, callback)
        self.add(lambda: scheduler.unbind_from_step(name))
        return name

    def wrap_clean(self) -> Callable[[], None]:
        """Return a zero-argument callable that cleans this trove."""

        def _clean() -> None:
            self.clean()

        return _clean

    def clean(self) -> None:
        """Dispose every tracked resource in registration order.

        Resources registered by a disposal action while cleaning are disposed
        in the same pass. With the propagate policy a failing disposal stops
        the pass; resources not yet reached stay tracked.
        """
        if not self._entries:
            self._state = TroveState.DISPOSED
            return

        logger.debug("Cleaning %d tracked resource(s)", len(self._entries), extra=self._log_extra)
        self._state = TroveState.CLEANING
        try:
            self._strategy.run(self._drain(), self._perform)
        finally:
            self._state = TroveState.ACTIVE if self._entries else TroveState.DISPOSED

    def destroy(self) -> None:
        """Alias for clean()."""
        self.clean()

    def dispose(self) -> None:
        """Alias for clean()."""
        self.clean()

    def _track(self, resource: Any, action: DisposalAction) -> TrackEntry:
        if self._state is TroveState.DISPOSED:
            logger.debug("Reactivating disposed trove", extra=self._log_extra)
            self._state = TroveState.ACTIVE
        elif self._state is TroveState.CLEANING:
            logger.debug(
                "%s registered during cleanup", type(resource).__name__, extra=self._log_extra
            )

        entry = TrackEntry(resource=resource, action=action)
        self._entries.append(entry)
        logger.debug(
            "Registered %s: %s", type(resource).__name__, action, extra=self._log_extra
        )
        return entry

    def _discard(self, entry: TrackEntry) -> bool:
        try:
            self._entries.remove(entry)
        except ValueError:
            return False
        return True

    def _forget(self, entry: TrackEntry) -> None:
        if self._discard(entry):
            logger.debug(
                "Untracked completed %s", type(entry.resource).__name__, extra=self._log_extra
            )

    def _drain(self) -> Iterator[TrackEntry]:
        while self._entries:
            try:
                entry = self._entries.popleft()
            except IndexError:
                return
            yield entry

    def _perform(self, entry: TrackEntry) -> None:
        entry.action.perform(entry.resource, self._scheduler)

    def _on_host_destroying(self, *_args: Any) -> None:
        self.destroy()

    @property
    def _log_extra(self) -> dict[str, str]:
        return {"trove": self.name}

    def __enter__(self) -> Trove:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, tb: Any) -> None:
        self.clean()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, resource: Any) -> bool:
        return any(entry.resource is resource for entry in list(self._entries))

    def __repr__(self) -> str:
        return f"<Trove {self.name!r} {self._state.value} entries={len(self._entries)}>"
