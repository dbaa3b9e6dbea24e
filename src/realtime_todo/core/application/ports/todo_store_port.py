from abc import ABC, abstractmethod

from realtime_todo.core.domain.todo import Todo, TodoCollection


class TodoStorePort(ABC):
    @abstractmethod
    def load(self) -> TodoCollection:
        """Returns the full collection, creating an empty document on first access."""
        pass

    @abstractmethod
    def save(self, collection: TodoCollection) -> None:
        """Overwrites the persisted document with the full collection."""
        pass

    @abstractmethod
    def list_sorted(self) -> list[Todo]:
        """Loads and returns the snapshot, newest first."""
        pass
