from realtime_todo.core.application.ports import SubscriberPort


class SubscriberRegistry:
    """Connected subscribers keyed by id. ``add`` and ``discard`` are the only mutators."""

    def __init__(self) -> None:
        self._subscribers: dict[str, SubscriberPort] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: SubscriberPort) -> bool:
        return subscriber.subscriber_id in self._subscribers

    def add(self, subscriber: SubscriberPort) -> None:
        self._subscribers[subscriber.subscriber_id] = subscriber

    def discard(self, subscriber: SubscriberPort) -> bool:
        """Returns True if the subscriber was registered."""
        return self._subscribers.pop(subscriber.subscriber_id, None) is not None

    def members(self) -> tuple[SubscriberPort, ...]:
        """Copy of the current members; safe to iterate while others connect or leave."""
        return tuple(self._subscribers.values())
