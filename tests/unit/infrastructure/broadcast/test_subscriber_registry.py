from unittest.mock import MagicMock

from realtime_todo.infrastructure.broadcast import SubscriberRegistry


def _subscriber(subscriber_id: str):
    subscriber = MagicMock()
    subscriber.subscriber_id = subscriber_id
    return subscriber


def test_add_and_discard():
    registry = SubscriberRegistry()
    subscriber = _subscriber("s1")

    registry.add(subscriber)
    assert subscriber in registry
    assert len(registry) == 1

    assert registry.discard(subscriber) is True
    assert subscriber not in registry
    assert registry.discard(subscriber) is False


def test_members_is_a_snapshot_copy():
    registry = SubscriberRegistry()
    first, second = _subscriber("s1"), _subscriber("s2")
    registry.add(first)
    registry.add(second)

    members = registry.members()
    registry.discard(first)

    assert members == (first, second)
    assert registry.members() == (second,)
