from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from realtime_todo.infrastructure.common.timestamps import format_timestamp


class CreateTodoDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    task: str


class UpdateTodoDTO(BaseModel):
    """Partial update. Unknown keys (``id``, ``createdAt``...) are dropped."""

    model_config = ConfigDict(extra="ignore")

    task: str | None = None
    completed: bool | None = None


class TodoResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    task: str
    completed: bool
    created_at: datetime = Field(serialization_alias="createdAt")

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)


class PushEventDTO(BaseModel):
    event: str
    data: list[TodoResponseDTO]

