"""On-disk shape of the todo document: ``{"todos": [{id, task, completed, createdAt}]}``."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from realtime_todo.core.domain.todo import Todo, TodoCollection
from realtime_todo.infrastructure.common.timestamps import ensure_utc, format_timestamp


class TodoRecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    # Older documents omit "task" for items posted without text
    task: str = ""
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _accept_legacy_numeric_id(cls, value: Any) -> Any:
        # Documents written by the previous server used millisecond timestamps as ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("created_at")
    @classmethod
    def _normalize_timezone(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_domain(cls, todo: Todo) -> "TodoRecordModel":
        return cls(
            id=todo.id,
            task=todo.description,
            completed=todo.completed,
            created_at=todo.created_at,
        )

    def to_domain(self) -> Todo:
        return Todo(
            id=self.id,
            description=self.task,
            completed=self.completed,
            created_at=self.created_at,
        )


class TodoDocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    todos: list[TodoRecordModel]

    @classmethod
    def from_domain(cls, collection: TodoCollection) -> "TodoDocumentModel":
        return cls(todos=[TodoRecordModel.from_domain(todo) for todo in collection.todos])

    def to_domain(self) -> TodoCollection:
        """Raises ValueError if the document holds duplicate ids."""
        return TodoCollection(todos=[record.to_domain() for record in self.todos])
