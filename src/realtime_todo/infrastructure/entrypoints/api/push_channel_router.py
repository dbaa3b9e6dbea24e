import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from realtime_todo.core.application.exceptions import TodoStorageError
from realtime_todo.core.application.services import TodoMutationService
from realtime_todo.infrastructure.broadcast import WebSocketSubscriber
from realtime_todo.infrastructure.entrypoints.api.dependencies import get_todo_service

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/ws")
async def push_channel(
    websocket: WebSocket,
    service: TodoMutationService = Depends(get_todo_service),
) -> None:
    """Server-to-client push channel. Inbound frames are read only to notice the close."""
    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket)
    try:
        await service.attach_subscriber(subscriber)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        logger.info("Push channel closed by client", subscriber_id=subscriber.subscriber_id)
    except TodoStorageError as exc:
        logger.error(
            "Cannot send initial snapshot",
            subscriber_id=subscriber.subscriber_id,
            error_type=type(exc).__name__,
            error_details=str(exc),
        )
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
    finally:
        await service.detach_subscriber(subscriber)
