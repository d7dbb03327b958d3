"""Test fake implementations for dependency injection testing."""

from tests.fakes.fake_resources import (
    DestroyAndDisconnect,
    DestroyOnly,
    FailingResource,
    FakeFuture,
    FakeHost,
    FakeTask,
    LowercaseDisconnect,
    RecordingCanceller,
)

__all__ = [
    "DestroyAndDisconnect",
    "DestroyOnly",
    "FailingResource",
    "FakeFuture",
    "FakeHost",
    "FakeTask",
    "LowercaseDisconnect",
    "RecordingCanceller",
]
