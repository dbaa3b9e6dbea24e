from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Response, status

from realtime_todo.core.application.exceptions import (
    TodoNotFoundError,
    TodoValidationError,
)
from realtime_todo.core.application.services import TodoMutationService
from realtime_todo.infrastructure.entrypoints.api.dependencies import get_todo_service
from realtime_todo.infrastructure.entrypoints.api.dtos.todo_dtos import (
    CreateTodoDTO,
    UpdateTodoDTO,
)
from realtime_todo.infrastructure.entrypoints.api.mappers.todo_mapper import TodoMapper
from realtime_todo.infrastructure.observability.metrics_service import TODO_MUTATIONS_TOTAL

logger = structlog.get_logger()
router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("")
async def list_todos(
    service: TodoMutationService = Depends(get_todo_service),
) -> list[dict[str, Any]]:
    todos = await service.list_todos()
    return TodoMapper.to_json_list(todos)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo(
    payload: CreateTodoDTO,
    service: TodoMutationService = Depends(get_todo_service),
) -> dict[str, Any]:
    with _track_mutation("create"):
        todo = await service.create_todo(payload.task)
    return TodoMapper.to_json(todo)


@router.put("/{todo_id}")
async def update_todo(
    todo_id: str,
    payload: UpdateTodoDTO,
    service: TodoMutationService = Depends(get_todo_service),
) -> dict[str, Any]:
    with _track_mutation("update"):
        todo = await service.update_todo(todo_id, TodoMapper.to_changes(payload))
    return TodoMapper.to_json(todo)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: str,
    service: TodoMutationService = Depends(get_todo_service),
) -> Response:
    with _track_mutation("delete"):
        await service.delete_todo(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@contextmanager
def _track_mutation(operation: str) -> Iterator[None]:
    """Count the mutation by outcome; errors propagate to the app's exception handlers."""
    outcome = "success"
    try:
        yield
    except TodoNotFoundError:
        outcome = "not_found"
        raise
    except TodoValidationError:
        outcome = "invalid"
        raise
    except Exception:
        outcome = "failure"
        raise
    finally:
        TODO_MUTATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()
