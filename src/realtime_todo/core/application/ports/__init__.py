from realtime_todo.core.application.ports.snapshot_publisher_port import SnapshotPublisherPort
from realtime_todo.core.application.ports.subscriber_port import SubscriberPort
from realtime_todo.core.application.ports.todo_store_port import TodoStorePort

__all__ = ["SnapshotPublisherPort", "SubscriberPort", "TodoStorePort"]
