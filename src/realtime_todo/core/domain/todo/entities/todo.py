from dataclasses import dataclass, replace
from datetime import datetime

from realtime_todo.core.domain.todo.value_objects.todo_changes import TodoChanges


def normalize_description(text: str | None) -> str:
    """Strip surrounding whitespace; reject text that ends up empty."""
    value = (text or "").strip()
    if not value:
        raise ValueError("Task text cannot be empty.")
    return value


@dataclass(frozen=True)
class Todo:
    """A single to-do item. ``id`` and ``created_at`` never change after creation."""

    id: str
    description: str
    completed: bool
    created_at: datetime

    @classmethod
    def create(cls, todo_id: str, description: str, created_at: datetime) -> "Todo":
        return cls(
            id=todo_id,
            description=normalize_description(description),
            completed=False,
            created_at=created_at,
        )

    def apply(self, changes: TodoChanges) -> "Todo":
        """Return a copy with the supplied fields merged in; absent fields are kept."""
        updated = self
        if changes.description is not None:
            updated = replace(updated, description=normalize_description(changes.description))
        if changes.completed is not None:
            updated = replace(updated, completed=changes.completed)
        return updated
