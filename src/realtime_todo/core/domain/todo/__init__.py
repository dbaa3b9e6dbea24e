from realtime_todo.core.domain.todo.entities.todo import Todo, normalize_description
from realtime_todo.core.domain.todo.entities.todo_collection import TodoCollection
from realtime_todo.core.domain.todo.todo_views import TodoSummary, filter_todos, summarize
from realtime_todo.core.domain.todo.value_objects.status_filter import StatusFilter
from realtime_todo.core.domain.todo.value_objects.todo_changes import TodoChanges

__all__ = [
    "StatusFilter",
    "Todo",
    "TodoChanges",
    "TodoCollection",
    "TodoSummary",
    "filter_todos",
    "normalize_description",
    "summarize",
]
