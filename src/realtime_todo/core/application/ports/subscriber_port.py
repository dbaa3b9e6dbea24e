from abc import ABC, abstractmethod

from realtime_todo.core.domain.todo import Todo


class SubscriberPort(ABC):
    """A connected client that receives full snapshots."""

    @property
    @abstractmethod
    def subscriber_id(self) -> str: ...

    @abstractmethod
    async def send_snapshot(self, snapshot: list[Todo]) -> None:
        """Deliver one ``todos_updated`` push. May raise if the peer is gone."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """End the connection so the client reconnects and resynchronizes."""
        pass
