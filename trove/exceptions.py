"""Trove-specific exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class TroveError(Exception):
    """Base exception for trove failures."""


class UnsupportedResourceError(TroveError, TypeError):
    """Raised when no disposal action can be determined for a resource.

    Parameters
    ----------
    resource : Any
        Resource that was offered for tracking.

    Attributes
    ----------
    resource : Any
        The rejected resource.
    type_name : str
        Runtime type name of the rejected resource.
    """

    def __init__(self, resource: Any) -> None:
        self.resource = resource
        self.type_name = type(resource).__name__
        super().__init__(
            f"failed to get cleanup function for object {self.type_name}: {resource!r}"
        )


class DetachedHostError(TroveError, ValueError):
    """Raised when attaching to a host object outside the hierarchy.

    Parameters
    ----------
    host : Any
        Host object that failed the reachability check.
    """

    def __init__(self, host: Any) -> None:
        self.host = host
        super().__init__(f"{host!r} is not a descendant of the game hierarchy")


@dataclass(frozen=True)
class DisposalFailure:
    """A resource whose disposal action raised.

    Attributes
    ----------
    resource : Any
        Resource being disposed.
    error : Exception
        Exception raised by its disposal action.
    """

    resource: Any
    error: Exception


class DisposalError(TroveError):
    """Raised after a collecting clean when one or more disposals failed.

    Parameters
    ----------
    failures : list[DisposalFailure]
        Every failure observed during the pass, in disposal order.
    """

    def __init__(self, failures: list[DisposalFailure]) -> None:
        self.failures = failures
        summary = ", ".join(
            f"{type(failure.resource).__name__}: {failure.error}" for failure in failures
        )
        super().__init__(f"{len(failures)} disposal(s) failed during clean ({summary})")
