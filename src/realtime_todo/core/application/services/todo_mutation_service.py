"""Read-modify-write-broadcast cycle over the todo store.

Every mutation holds ``self._lock`` for its whole load -> mutate -> save ->
publish sequence. Store I/O runs in a worker thread, so the lock is the only
thing keeping two concurrent mutations from reading the same state and
overwriting each other's write. Publishing inside the lock keeps the order of
pushed snapshots equal to the order of writes.

The locked sequence runs in its own task. Cancelling the caller (a client
that hung up mid-request) does not cancel that task, so the lock is released
only once the worker thread's write has landed and been broadcast.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar

import structlog

from realtime_todo.core.application.exceptions import (
    TodoNotFoundError,
    TodoValidationError,
)
from realtime_todo.core.application.ports import (
    SnapshotPublisherPort,
    SubscriberPort,
    TodoStorePort,
)
from realtime_todo.core.domain.todo import Todo, TodoChanges, TodoCollection
from realtime_todo.infrastructure.observability.tracing_setup import trace_operation

logger = structlog.get_logger()

T = TypeVar("T")


def _new_todo_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TodoMutationService:
    def __init__(
        self,
        store: TodoStorePort,
        publisher: SnapshotPublisherPort,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_todo_id,
    ) -> None:
        self._store = store
        self._publisher = publisher
        self._clock = clock
        self._id_factory = id_factory
        self._lock = asyncio.Lock()

    @trace_operation("todo.list")
    async def list_todos(self) -> list[Todo]:
        async with self._lock:
            return await asyncio.to_thread(self._store.list_sorted)

    @trace_operation("todo.create")
    async def create_todo(self, description: str) -> Todo:
        todo = await self._run_exclusive(lambda: self._create(description))
        logger.info("Todo created", todo_id=todo.id, event_type="todo.create")
        return todo

    @trace_operation("todo.update")
    async def update_todo(self, todo_id: str, changes: TodoChanges) -> Todo:
        updated = await self._run_exclusive(lambda: self._update(todo_id, changes))
        logger.info(
            "Todo updated",
            todo_id=todo_id,
            completed=updated.completed,
            event_type="todo.update",
        )
        return updated

    @trace_operation("todo.delete")
    async def delete_todo(self, todo_id: str) -> None:
        await self._run_exclusive(lambda: self._delete(todo_id))
        logger.info("Todo deleted", todo_id=todo_id, event_type="todo.delete")

    # ── Subscriptions ────────────────────────────────────────────────

    async def attach_subscriber(self, subscriber: SubscriberPort) -> None:
        """Deliver the current snapshot and register, with no write in between."""
        async with self._lock:
            snapshot = await asyncio.to_thread(self._store.list_sorted)
            await self._publisher.connect(subscriber, snapshot)

    async def detach_subscriber(self, subscriber: SubscriberPort) -> None:
        await self._publisher.disconnect(subscriber)

    # ── Locked mutations ─────────────────────────────────────────────

    async def _create(self, description: str) -> Todo:
        collection = await self._load()
        todo = self._build_todo(description, collection)
        collection.add(todo)
        await self._persist_and_publish(collection)
        return todo

    async def _update(self, todo_id: str, changes: TodoChanges) -> Todo:
        collection = await self._load()
        current = collection.find(todo_id)
        if current is None:
            raise TodoNotFoundError(todo_id)
        try:
            updated = current.apply(changes)
        except ValueError as exc:
            raise TodoValidationError(str(exc), context={"todo_id": todo_id}) from exc
        collection.replace(updated)
        await self._persist_and_publish(collection)
        return updated

    async def _delete(self, todo_id: str) -> None:
        collection = await self._load()
        if collection.remove(todo_id) is None:
            raise TodoNotFoundError(todo_id)
        await self._persist_and_publish(collection)

    # ── Internals ────────────────────────────────────────────────────

    async def _run_exclusive(self, mutation: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.ensure_future(self._locked(mutation))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            await asyncio.wait({task})
            error = None if task.cancelled() else task.exception()
            if error is not None:
                logger.warning(
                    "Abandoned mutation failed",
                    error_type=type(error).__name__,
                    error_details=str(error),
                )
            raise

    async def _locked(self, mutation: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            return await mutation()

    async def _load(self) -> TodoCollection:
        return await asyncio.to_thread(self._store.load)

    async def _persist_and_publish(self, collection: TodoCollection) -> None:
        await asyncio.to_thread(self._store.save, collection)
        await self._publisher.notify_subscribers(collection.sorted())

    def _build_todo(self, description: str, collection: TodoCollection) -> Todo:
        todo_id = self._id_factory()
        while collection.find(todo_id) is not None:
            todo_id = self._id_factory()
        try:
            return Todo.create(todo_id, description, self._clock())
        except ValueError as exc:
            raise TodoValidationError(str(exc)) from exc
