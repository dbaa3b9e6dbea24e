"""Full-snapshot fan-out to connected subscribers.

Delivery is fire-and-forget: no acknowledgement, no retry, no per-subscriber
queue. A subscriber whose send fails or exceeds the timeout is unregistered
and its connection closed; it gets a fresh snapshot when it reconnects.
"""

import asyncio

import structlog

from realtime_todo.core.application.ports import SnapshotPublisherPort, SubscriberPort
from realtime_todo.core.domain.todo import Todo
from realtime_todo.infrastructure.broadcast.subscriber_registry import SubscriberRegistry
from realtime_todo.infrastructure.observability.metrics_service import (
    TODO_BROADCASTS_TOTAL,
    TODO_DELIVERY_FAILURES_TOTAL,
    TODO_SUBSCRIBERS,
)

logger = structlog.get_logger()


class BroadcastGateway(SnapshotPublisherPort):
    def __init__(self, send_timeout_seconds: float = 2.0, registry: SubscriberRegistry | None = None):
        self._send_timeout_seconds = send_timeout_seconds
        self._registry = registry or SubscriberRegistry()

    @property
    def subscriber_count(self) -> int:
        return len(self._registry)

    async def connect(self, subscriber: SubscriberPort, snapshot: list[Todo]) -> None:
        """A subscriber that cannot take the initial snapshot is closed, never registered."""
        if not await self._send(subscriber, snapshot):
            await self._close(subscriber)
            return
        self._registry.add(subscriber)
        TODO_SUBSCRIBERS.set(len(self._registry))
        logger.info(
            "Subscriber connected",
            subscriber_id=subscriber.subscriber_id,
            subscribers=len(self._registry),
        )

    async def disconnect(self, subscriber: SubscriberPort) -> None:
        if self._registry.discard(subscriber):
            TODO_SUBSCRIBERS.set(len(self._registry))
            logger.info(
                "Subscriber disconnected",
                subscriber_id=subscriber.subscriber_id,
                subscribers=len(self._registry),
            )

    async def notify_subscribers(self, snapshot: list[Todo]) -> None:
        members = self._registry.members()
        TODO_BROADCASTS_TOTAL.inc()
        if not members:
            return
        results = await asyncio.gather(
            *(self._deliver(subscriber, snapshot) for subscriber in members)
        )
        delivered = sum(1 for ok in results if ok)
        logger.info(
            "Snapshot broadcast",
            todos=len(snapshot),
            delivered=delivered,
            failed=len(members) - delivered,
        )

    async def _deliver(self, subscriber: SubscriberPort, snapshot: list[Todo]) -> bool:
        if await self._send(subscriber, snapshot):
            return True
        await self.disconnect(subscriber)
        await self._close(subscriber)
        return False

    async def _send(self, subscriber: SubscriberPort, snapshot: list[Todo]) -> bool:
        try:
            await asyncio.wait_for(subscriber.send_snapshot(snapshot), self._send_timeout_seconds)
            return True
        except Exception as exc:
            TODO_DELIVERY_FAILURES_TOTAL.inc()
            logger.warning(
                "Snapshot delivery failed",
                subscriber_id=subscriber.subscriber_id,
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return False

    async def _close(self, subscriber: SubscriberPort) -> None:
        # The peer already failed a send; a failing close only means it is gone
        try:
            await asyncio.wait_for(subscriber.close(), self._send_timeout_seconds)
        except Exception as exc:
            logger.debug(
                "Subscriber close failed",
                subscriber_id=subscriber.subscriber_id,
                error_type=type(exc).__name__,
            )
