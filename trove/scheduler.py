"""Cooperative task scheduling built on generators."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Generator
from typing import Any

from trove.core.resolver import is_cooperative_task

logger = logging.getLogger(__name__)


class GeneratorTasks:
    """Stateless task canceller for generator and coroutine objects.

    Cancelling a task closes it, which raises GeneratorExit at its current
    suspension point so its finally blocks run.
    """

    def is_task(self, obj: Any) -> bool:
        return is_cooperative_task(obj)

    def cancel(self, task: Any) -> None:
        task.close()


class TaskScheduler(GeneratorTasks):
    """Round-robin scheduler for generator tasks.

    Each call to step() first runs the callbacks bound with bind_to_step(),
    then resumes every pending task once. A task finishes when its generator
    is exhausted. Not thread-safe.
    """

    def __init__(self) -> None:
        self._tasks: deque[Generator[Any, Any, Any]] = deque()
        self._step_callbacks: dict[str, Callable[[float], Any]] = {}

    def spawn(self, task: Any, *args: Any) -> Generator[Any, Any, Any]:
        """Schedule a generator, or a generator function called with args.

        Parameters
        ----------
        task : Any
            Generator object or generator function
        *args : Any
            Arguments for the generator function

        Returns
        -------
        Generator
            The scheduled task handle

        Raises
        ------
        TypeError
            If task does not produce a generator
        """
        if callable(task):
            task = task(*args)

        if not isinstance(task, Generator):
            raise TypeError(f"Cannot schedule {type(task).__name__}: expected a generator")

        self._tasks.append(task)
        logger.debug("Scheduled task: %s", _get_task_name(task))
        return task

    def cancel(self, task: Any) -> None:
        """Remove a task from the run queue and close it."""
        try:
            self._tasks.remove(task)
        except ValueError:
            pass
        super().cancel(task)
        logger.debug("Cancelled task: %s", _get_task_name(task))

    def step(self, dt: float = 0.0) -> None:
        """Run bound step callbacks, then resume each pending task once."""
        for callback in list(self._step_callbacks.values()):
            callback(dt)

        for task in list(self._tasks):
            if task not in self._tasks:
                continue
            try:
                task.send(None)
            except StopIteration:
                self._discard(task)

    def bind_to_step(self, name: str, callback: Callable[[float], Any]) -> None:
        """Run callback(dt) on every step under the given name.

        Binding an existing name replaces its callback.
        """
        self._step_callbacks[name] = callback

    def unbind_from_step(self, name: str) -> None:
        """Remove a step callback. Unknown names are ignored."""
        self._step_callbacks.pop(name, None)

    def is_bound(self, name: str) -> bool:
        return name in self._step_callbacks

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _discard(self, task: Generator[Any, Any, Any]) -> None:
        try:
            self._tasks.remove(task)
        except ValueError:
            pass


def _get_task_name(func: Any) -> str:
    """Retrieve a readable name for a task for logging purposes."""
    if hasattr(func, "__qualname__"):
        return func.__qualname__
    if hasattr(func, "__name__"):
        return func.__name__
    return repr(func)
