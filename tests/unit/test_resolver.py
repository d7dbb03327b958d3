"""Unit tests for disposal action resolution."""

import asyncio
from functools import partial

import pytest

from tests.fakes import (
    DestroyAndDisconnect,
    DestroyOnly,
    FakeFuture,
    FakeTask,
    LowercaseDisconnect,
    RecordingCanceller,
)
from trove import (
    CancelCooperativeTask,
    CancelPendingOperation,
    InvokeDirectly,
    InvokeNamedCapability,
    Signal,
    UnsupportedResourceError,
    resolve_disposal,
)
from trove.core.resolver import is_cooperative_task


def _generator():
    yield


class TestResolvePriority:
    """Test the fixed resolution order."""

    def test_callable_resolves_to_invoke_directly(self) -> None:
        """Test plain functions are invoked directly."""
        assert resolve_disposal(lambda: None) == InvokeDirectly()

    def test_callable_ignores_explicit_method(self) -> None:
        """Test an explicit method never overrides a callable."""
        assert resolve_disposal(partial(print), "close") == InvokeDirectly()

    def test_callable_object_with_destroy_is_invoked_directly(self) -> None:
        """Test __call__ wins over a Destroy capability."""

        class CallableResource(DestroyOnly):
            def __call__(self) -> None:
                pass

        assert resolve_disposal(CallableResource()) == InvokeDirectly()

    def test_generator_resolves_to_task_cancellation(self) -> None:
        """Test generator objects are cancelled."""
        gen = _generator()

        assert resolve_disposal(gen, "destroy") == CancelCooperativeTask()

    def test_custom_task_predicate(self) -> None:
        """Test the injected predicate decides what a task is."""
        canceller = RecordingCanceller()

        action = resolve_disposal(FakeTask(), is_task=canceller.is_task)

        assert action == CancelCooperativeTask()

    def test_explicit_method_overrides_probing(self) -> None:
        """Test an explicit method beats Destroy."""
        action = resolve_disposal(DestroyAndDisconnect(), "customClose")

        assert action == InvokeNamedCapability("customClose")

    def test_explicit_method_not_validated(self) -> None:
        """Test an absent explicit method is accepted at resolution time."""
        action = resolve_disposal(object(), "nonexistent")

        assert action == InvokeNamedCapability("nonexistent")


class TestCapabilityProbing:
    """Test structural capability detection."""

    def test_destroy_preferred_over_disconnect(self) -> None:
        """Test Destroy wins when disconnect is also present."""
        assert resolve_disposal(DestroyAndDisconnect()) == InvokeNamedCapability("Destroy")

    def test_lowercase_disconnect(self) -> None:
        """Test the lowest-priority capability is still found."""
        assert resolve_disposal(LowercaseDisconnect()) == InvokeNamedCapability("disconnect")

    def test_connection_resolves_to_disconnect(self) -> None:
        """Test signal connections dispose via Disconnect."""
        connection = Signal().connect(lambda: None)

        assert resolve_disposal(connection) == InvokeNamedCapability("Disconnect")

    def test_non_callable_attribute_is_ignored(self) -> None:
        """Test a data attribute named destroy is not a capability."""

        class Flagged:
            destroy = True

            def disconnect(self) -> None:
                pass

        assert resolve_disposal(Flagged()) == InvokeNamedCapability("disconnect")


class TestUnsupportedResources:
    """Test resolution failure."""

    @pytest.mark.parametrize("resource", [{}, 42, "text", object()])
    def test_unsupported_resource_raises(self, resource: object) -> None:
        """Test objects without capabilities are rejected."""
        with pytest.raises(UnsupportedResourceError) as exc:
            resolve_disposal(resource)

        assert exc.value.resource is resource
        assert exc.value.type_name == type(resource).__name__

    def test_error_message_names_type_and_value(self) -> None:
        """Test the message carries the runtime type and repr."""
        with pytest.raises(UnsupportedResourceError, match=r"dict: \{'a': 1\}"):
            resolve_disposal({"a": 1})

    def test_error_is_a_type_error(self) -> None:
        """Test callers catching TypeError see resolution failures."""
        with pytest.raises(TypeError):
            resolve_disposal([])


class TestIsCooperativeTask:
    """Test the default task predicate."""

    def test_generator_is_task(self) -> None:
        gen = _generator()
        assert is_cooperative_task(gen)
        gen.close()

    def test_coroutine_is_task(self) -> None:
        async def work() -> None:
            pass

        coro = work()
        assert is_cooperative_task(coro)
        coro.close()

    def test_future_is_not_task(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            assert not is_cooperative_task(loop.create_future())
        finally:
            loop.close()

    def test_generator_function_is_not_task(self) -> None:
        assert not is_cooperative_task(_generator)


class TestCancelPendingOperation:
    """Test the action used for tracked futures."""

    def test_cancels_running_operation(self, canceller: RecordingCanceller) -> None:
        future = FakeFuture()

        CancelPendingOperation().perform(future, canceller)

        assert future.cancel_calls == 1

    def test_skips_finished_operation(self, canceller: RecordingCanceller) -> None:
        future = FakeFuture()
        future.set_result(1)

        CancelPendingOperation().perform(future, canceller)

        assert future.cancel_calls == 0
