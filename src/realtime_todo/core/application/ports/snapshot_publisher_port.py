from abc import ABC, abstractmethod

from realtime_todo.core.application.ports.subscriber_port import SubscriberPort
from realtime_todo.core.domain.todo import Todo


class SnapshotPublisherPort(ABC):
    @abstractmethod
    async def connect(self, subscriber: SubscriberPort, snapshot: list[Todo]) -> None:
        """Sends the initial snapshot to a new subscriber, then registers it."""
        pass

    @abstractmethod
    async def disconnect(self, subscriber: SubscriberPort) -> None:
        """Unregisters a subscriber. Unknown subscribers are ignored."""
        pass

    @abstractmethod
    async def notify_subscribers(self, snapshot: list[Todo]) -> None:
        """Pushes the snapshot to every registered subscriber, fire-and-forget."""
        pass
