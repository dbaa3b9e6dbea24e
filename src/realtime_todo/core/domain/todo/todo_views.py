"""Read-side views over a snapshot, as rendered by clients.

The server always pushes the full list; filtering, searching and the
progress counters are computed client-side from that snapshot.
"""

from dataclasses import dataclass

from realtime_todo.core.domain.todo.entities.todo import Todo
from realtime_todo.core.domain.todo.value_objects.status_filter import StatusFilter


@dataclass(frozen=True)
class TodoSummary:
    total: int
    completed: int
    active: int
    completion_percentage: int


def filter_todos(
    todos: list[Todo],
    status: StatusFilter = StatusFilter.ALL,
    search: str = "",
) -> list[Todo]:
    """Apply the status filter, then a case-insensitive substring search."""
    if status == StatusFilter.ACTIVE:
        todos = [todo for todo in todos if not todo.completed]
    elif status == StatusFilter.COMPLETED:
        todos = [todo for todo in todos if todo.completed]

    needle = search.strip().lower()
    if needle:
        todos = [todo for todo in todos if needle in todo.description.lower()]
    return list(todos)


def summarize(todos: list[Todo]) -> TodoSummary:
    total = len(todos)
    completed = sum(1 for todo in todos if todo.completed)
    percentage = round(completed / total * 100) if total else 0
    return TodoSummary(
        total=total,
        completed=completed,
        active=total - completed,
        completion_percentage=percentage,
    )
