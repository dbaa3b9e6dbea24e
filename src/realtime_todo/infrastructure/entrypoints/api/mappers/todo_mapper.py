from typing import Any

from realtime_todo.core.domain.todo import Todo, TodoChanges
from realtime_todo.infrastructure.entrypoints.api.dtos.todo_dtos import (
    PushEventDTO,
    TodoResponseDTO,
    UpdateTodoDTO,
)


class TodoMapper:
    @staticmethod
    def to_dto(todo: Todo) -> TodoResponseDTO:
        return TodoResponseDTO(
            id=todo.id,
            task=todo.description,
            completed=todo.completed,
            created_at=todo.created_at,
        )

    @staticmethod
    def to_json(todo: Todo) -> dict[str, Any]:
        return TodoMapper.to_dto(todo).model_dump(mode="json", by_alias=True)

    @staticmethod
    def to_json_list(todos: list[Todo]) -> list[dict[str, Any]]:
        return [TodoMapper.to_json(todo) for todo in todos]

    @staticmethod
    def to_push_event(event: str, snapshot: list[Todo]) -> dict[str, Any]:
        payload = PushEventDTO(event=event, data=[TodoMapper.to_dto(todo) for todo in snapshot])
        return payload.model_dump(mode="json", by_alias=True)

    @staticmethod
    def to_changes(dto: UpdateTodoDTO) -> TodoChanges:
        return TodoChanges(description=dto.task, completed=dto.completed)
