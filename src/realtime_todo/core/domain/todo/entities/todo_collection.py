from dataclasses import dataclass, field

from realtime_todo.core.domain.todo.entities.todo import Todo


@dataclass
class TodoCollection:
    """Consistency root for the persisted document: ids are unique at all times."""

    todos: list[Todo] = field(default_factory=list)

    def __post_init__(self):
        seen: set[str] = set()
        for todo in self.todos:
            if todo.id in seen:
                raise ValueError(f"Duplicate todo id '{todo.id}'")
            seen.add(todo.id)

    def __len__(self) -> int:
        return len(self.todos)

    def find(self, todo_id: str) -> Todo | None:
        return next((todo for todo in self.todos if todo.id == todo_id), None)

    def add(self, todo: Todo) -> None:
        if self.find(todo.id) is not None:
            raise ValueError(f"Duplicate todo id '{todo.id}'")
        self.todos.append(todo)

    def replace(self, todo: Todo) -> None:
        for index, current in enumerate(self.todos):
            if current.id == todo.id:
                self.todos[index] = todo
                return
        raise KeyError(todo.id)

    def remove(self, todo_id: str) -> Todo | None:
        todo = self.find(todo_id)
        if todo is not None:
            self.todos = [current for current in self.todos if current.id != todo_id]
        return todo

    def sorted(self) -> list[Todo]:
        """Newest first; equal timestamps fall back to id descending."""
        return sorted(self.todos, key=lambda todo: (todo.created_at, todo.id), reverse=True)
