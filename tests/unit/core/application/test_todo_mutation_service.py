import asyncio
import itertools
import time
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from realtime_todo.core.application.exceptions import (
    TodoNotFoundError,
    TodoStorageError,
    TodoValidationError,
)
from realtime_todo.core.application.services import TodoMutationService
from realtime_todo.core.domain.todo import TodoChanges, TodoCollection
from realtime_todo.infrastructure.repositories import TodoStoreFileAdapter

START = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


def ticking_clock():
    ticks = itertools.count()
    return lambda: START + timedelta(seconds=next(ticks))


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"todo-{next(counter):04d}"


@pytest.fixture
def store(tmp_path):
    return TodoStoreFileAdapter(tmp_path / "db.json")


@pytest.fixture
def publisher():
    return AsyncMock()


@pytest.fixture
def service(store, publisher):
    return TodoMutationService(
        store, publisher, clock=ticking_clock(), id_factory=sequential_ids()
    )


def last_snapshot(publisher):
    return publisher.notify_subscribers.await_args.args[0]


@pytest.mark.asyncio
async def test_create_toggle_delete_scenario(service, publisher):
    created = await service.create_todo("Buy milk")

    assert created.description == "Buy milk"
    assert created.completed is False
    assert last_snapshot(publisher) == [created]

    toggled = await service.update_todo(created.id, TodoChanges(completed=True))

    assert toggled.completed is True
    assert last_snapshot(publisher) == [toggled]

    await service.delete_todo(created.id)

    assert last_snapshot(publisher) == []
    assert await service.list_todos() == []
    assert publisher.notify_subscribers.await_count == 3

    with pytest.raises(TodoNotFoundError):
        await service.delete_todo(created.id)
    assert publisher.notify_subscribers.await_count == 3


@pytest.mark.asyncio
async def test_create_rejects_blank_text_without_writing(service, publisher, store):
    with pytest.raises(TodoValidationError):
        await service.create_todo("   ")

    publisher.notify_subscribers.assert_not_awaited()
    assert len(store.load()) == 0


@pytest.mark.asyncio
async def test_unknown_id_raises_not_found_and_does_not_broadcast(service, publisher):
    with pytest.raises(TodoNotFoundError):
        await service.update_todo("missing", TodoChanges(completed=True))
    with pytest.raises(TodoNotFoundError):
        await service.delete_todo("missing")

    publisher.notify_subscribers.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_preserves_unspecified_fields(service):
    created = await service.create_todo("Walk the dog")

    renamed = await service.update_todo(created.id, TodoChanges(description="Walk the cat"))

    assert renamed.description == "Walk the cat"
    assert renamed.completed is False
    assert renamed.id == created.id
    assert renamed.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_with_blank_text_is_rejected(service, publisher):
    created = await service.create_todo("Walk the dog")
    publisher.notify_subscribers.reset_mock()

    with pytest.raises(TodoValidationError):
        await service.update_todo(created.id, TodoChanges(description=""))

    publisher.notify_subscribers.assert_not_awaited()


@pytest.mark.asyncio
async def test_newest_todo_is_listed_first(service):
    first = await service.create_todo("first")
    second = await service.create_todo("second")

    assert [todo.id for todo in await service.list_todos()] == [second.id, first.id]


@pytest.mark.asyncio
async def test_concurrent_creates_are_all_persisted(service, store, publisher):
    texts = [f"task {i}" for i in range(20)]

    created = await asyncio.gather(*(service.create_todo(text) for text in texts))

    persisted = store.load()
    assert len(persisted) == 20
    assert {todo.id for todo in created} == {todo.id for todo in persisted.todos}
    # Each broadcast carries one more todo than the previous one
    sizes = [len(call.args[0]) for call in publisher.notify_subscribers.await_args_list]
    assert sizes == list(range(1, 21))


@pytest.mark.asyncio
async def test_colliding_generated_id_is_regenerated(store, publisher):
    ids = iter(["same", "same", "other"])
    service = TodoMutationService(
        store, publisher, clock=ticking_clock(), id_factory=lambda: next(ids)
    )

    first = await service.create_todo("one")
    second = await service.create_todo("two")

    assert (first.id, second.id) == ("same", "other")


@pytest.mark.asyncio
async def test_storage_failure_propagates_without_broadcast(publisher):
    broken_store = MagicMock()
    broken_store.load.side_effect = TodoStorageError("unreadable")
    service = TodoMutationService(broken_store, publisher)

    with pytest.raises(TodoStorageError):
        await service.create_todo("Buy milk")

    publisher.notify_subscribers.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_save_does_not_broadcast(store, publisher):
    store.load()
    store.save = MagicMock(side_effect=TodoStorageError("disk full"))
    service = TodoMutationService(store, publisher)

    with pytest.raises(TodoStorageError):
        await service.create_todo("Buy milk")

    publisher.notify_subscribers.assert_not_awaited()


@pytest.mark.asyncio
async def test_attach_subscriber_delivers_current_snapshot(service, publisher):
    created = await service.create_todo("Buy milk")
    subscriber = MagicMock()

    await service.attach_subscriber(subscriber)

    publisher.connect.assert_awaited_once_with(subscriber, [created])


@pytest.mark.asyncio
async def test_detach_subscriber_delegates_to_publisher(service, publisher):
    subscriber = MagicMock()

    await service.detach_subscriber(subscriber)

    publisher.disconnect.assert_awaited_once_with(subscriber)


@pytest.mark.asyncio
async def test_delete_of_unknown_id_leaves_document_untouched(service, store):
    await service.create_todo("Buy milk")
    before = store.file_path.read_bytes()

    with pytest.raises(TodoNotFoundError):
        await service.delete_todo("missing")

    assert store.file_path.read_bytes() == before


class SlowSaveStore(TodoStoreFileAdapter):
    """Blocks the worker thread on the next save for ``next_save_delay`` seconds."""

    next_save_delay = 0.0

    def save(self, collection: TodoCollection) -> None:
        delay, self.next_save_delay = self.next_save_delay, 0.0
        time.sleep(delay)
        super().save(collection)


@pytest.mark.asyncio
async def test_cancelled_create_finishes_its_write_before_the_next_mutation(tmp_path, publisher):
    store = SlowSaveStore(tmp_path / "db.json")
    store.load()
    store.next_save_delay = 0.3
    service = TodoMutationService(
        store, publisher, clock=ticking_clock(), id_factory=sequential_ids()
    )

    abandoned = asyncio.create_task(service.create_todo("A"))
    await asyncio.sleep(0.1)
    abandoned.cancel()

    acknowledged = await service.create_todo("B")

    with pytest.raises(asyncio.CancelledError):
        await abandoned
    persisted = {todo.description: todo.id for todo in store.load().todos}
    assert persisted.keys() == {"A", "B"}
    assert persisted["B"] == acknowledged.id
    assert [todo.description for todo in last_snapshot(publisher)] == ["B", "A"]
