from realtime_todo.core.application.exceptions.todo_exceptions import (
    TodoAppError,
    TodoNotFoundError,
    TodoStorageError,
    TodoValidationError,
)

__all__ = [
    "TodoAppError",
    "TodoNotFoundError",
    "TodoStorageError",
    "TodoValidationError",
]
