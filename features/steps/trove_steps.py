"""BDD step definitions for trove lifecycle scenarios."""

from behave import given, then, when
from behave.runner import Context

from trove import DetachedHostError, Instance, Trove


class NamedResource:
    """Resource that records its name in the scenario's disposal log."""

    def __init__(self, name: str, disposed: list[str]) -> None:
        self.name = name
        self._disposed = disposed

    def destroy(self) -> None:
        self._disposed.append(self.name)


def _track(context: Context, trove_name: str, names: list[str]) -> None:
    trove = context.troves[trove_name]
    for name in names:
        context.instances[name] = trove.add(NamedResource(name, context.disposed))


@given('a trove named "{name}"')
def step_trove(context: Context, name: str) -> None:
    context.troves[name] = Trove(name=name, root=context.root)


@given('a trove named "{name}" using the scheduler')
def step_trove_with_scheduler(context: Context, name: str) -> None:
    context.troves[name] = Trove(name=name, root=context.root, scheduler=context.scheduler)


@given('the trove "{trove_name}" tracks resources "{first}", "{second}" and "{third}"')
def step_track_resources(
    context: Context, trove_name: str, first: str, second: str, third: str
) -> None:
    _track(context, trove_name, [first, second, third])


@given('an instance "{name}" in the game hierarchy')
def step_instance(context: Context, name: str) -> None:
    context.instances[name] = Instance(name, parent=context.root)


@given('a trove "{name}" attached to "{instance_name}"')
def step_attached_trove(context: Context, name: str, instance_name: str) -> None:
    trove = Trove(name=name, root=context.root)
    trove.attach_to_lifecycle(context.instances[instance_name])
    context.troves[name] = trove


@given('a nested trove "{child_name}" inside "{parent_name}"')
def step_nested_trove(context: Context, child_name: str, parent_name: str) -> None:
    context.troves[child_name] = context.troves[parent_name].spawn_nested_registry()


@given('the trove "{trove_name}" owns a scheduled counting task')
def step_counting_task(context: Context, trove_name: str) -> None:
    context.count = 0

    def counting():
        while True:
            context.count += 1
            yield

    context.troves[trove_name].add(context.scheduler.spawn(counting))


@when('the trove "{name}" is cleaned')
def step_clean(context: Context, name: str) -> None:
    context.troves[name].clean()


@when('"{resource}" is removed from the trove "{trove_name}"')
def step_remove(context: Context, resource: str, trove_name: str) -> None:
    assert context.troves[trove_name].remove(context.instances[resource])


@when('the instance "{name}" is destroyed')
def step_destroy_instance(context: Context, name: str) -> None:
    context.instances[name].destroy()


@when('the trove "{name}" is attached to an unparented instance')
def step_attach_orphan(context: Context, name: str) -> None:
    try:
        context.troves[name].attach_to_lifecycle(Instance("Orphan"))
        context.error = None
    except DetachedHostError as e:
        context.error = e


@when("the scheduler steps {count:d} times")
def step_scheduler(context: Context, count: int) -> None:
    for _ in range(count):
        context.scheduler.step()


@then('the disposed resources are "{first}", "{second}" and "{third}"')
def step_check_disposed(context: Context, first: str, second: str, third: str) -> None:
    assert context.disposed == [first, second, third], context.disposed


@then('the trove "{name}" is empty')
def step_check_empty(context: Context, name: str) -> None:
    assert len(context.troves[name]) == 0


@then("a detached host error is raised")
def step_check_detached(context: Context) -> None:
    assert isinstance(context.error, DetachedHostError)


@then("the counting task counted {count:d} times")
def step_check_count(context: Context, count: int) -> None:
    assert context.count == count, context.count


@then('the log for trove "{name}" records "{text}"')
def step_check_log(context: Context, name: str, text: str) -> None:
    messages = [
        record.getMessage()
        for record in context.log_capture.records
        if getattr(record, "trove", None) == name
    ]
    assert any(text in message for message in messages), messages
