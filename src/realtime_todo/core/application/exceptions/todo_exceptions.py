"""Application-layer exception hierarchy.

Entrypoints map each subclass to a transport status; nothing here is
retried automatically.
"""

from typing import Any


class TodoAppError(Exception):
    """Base exception for all application-layer errors."""

    def __init__(self, message: str = "", *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class TodoNotFoundError(TodoAppError):
    """The mutation target id is not in the collection."""

    def __init__(self, todo_id: str) -> None:
        super().__init__("Todo not found", context={"todo_id": todo_id})
        self.todo_id = todo_id


class TodoStorageError(TodoAppError):
    """The persisted document could not be read, parsed or written."""


class TodoValidationError(TodoAppError):
    """The request carried data the domain rejects (e.g. empty task text)."""
