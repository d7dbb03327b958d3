"""Failure handling strategies for bulk disposal."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from trove.constants import FailurePolicy
from trove.exceptions import DisposalError, DisposalFailure

logger = logging.getLogger(__name__)


class DisposalStrategy(Protocol):
    """Drives a bulk clean over a stream of entries."""

    policy: FailurePolicy

    def run(self, entries: Iterable[Any], perform: Callable[[Any], None]) -> None: ...


class PropagateFailures:
    """Stop at the first failing disposal and let its exception escape.

    Entries not yet drained stay registered.
    """

    policy = FailurePolicy.PROPAGATE

    def run(self, entries: Iterable[Any], perform: Callable[[Any], None]) -> None:
        for entry in entries:
            perform(entry)


class CollectFailures:
    """Dispose every entry, then raise all failures together.

    Raises
    ------
    DisposalError
        After the pass, if any disposal action raised
    """

    policy = FailurePolicy.COLLECT

    def run(self, entries: Iterable[Any], perform: Callable[[Any], None]) -> None:
        failures: list[DisposalFailure] = []

        for entry in entries:
            try:
                perform(entry)
            except Exception as e:
                logger.warning(
                    "Cleanup failed for %s %r: %s",
                    type(entry.resource).__name__,
                    entry.resource,
                    e,
                )
                failures.append(DisposalFailure(resource=entry.resource, error=e))

        if failures:
            raise DisposalError(failures)


_STRATEGIES: dict[FailurePolicy, type[PropagateFailures] | type[CollectFailures]] = {
    FailurePolicy.PROPAGATE: PropagateFailures,
    FailurePolicy.COLLECT: CollectFailures,
}


def get_strategy(policy: FailurePolicy | str) -> DisposalStrategy:
    """Build the strategy for a failure policy.

    Parameters
    ----------
    policy : FailurePolicy | str
        Policy or its configuration value ("propagate" or "collect")

    Returns
    -------
    DisposalStrategy
        New strategy instance

    Raises
    ------
    ValueError
        If the policy is unknown
    """
    try:
        key = FailurePolicy(policy)
    except ValueError as e:
        valid = [p.value for p in FailurePolicy]
        raise ValueError(f"Unknown failure policy: {policy}. Valid policies: {valid}") from e

    return _STRATEGIES[key]()
