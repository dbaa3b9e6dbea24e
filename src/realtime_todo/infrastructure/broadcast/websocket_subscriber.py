from uuid import uuid4

from fastapi import WebSocket, status

from realtime_todo.core.application.ports import SubscriberPort
from realtime_todo.core.domain.todo import Todo
from realtime_todo.infrastructure.entrypoints.api.mappers.todo_mapper import TodoMapper

TODOS_UPDATED_EVENT = "todos_updated"


class WebSocketSubscriber(SubscriberPort):
    """Push channel peer. Each push is one JSON text frame ``{"event", "data"}``."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._subscriber_id = uuid4().hex

    @property
    def subscriber_id(self) -> str:
        return self._subscriber_id

    async def send_snapshot(self, snapshot: list[Todo]) -> None:
        await self._websocket.send_json(TodoMapper.to_push_event(TODOS_UPDATED_EVENT, snapshot))

    async def close(self) -> None:
        await self._websocket.close(code=status.WS_1011_INTERNAL_ERROR)
