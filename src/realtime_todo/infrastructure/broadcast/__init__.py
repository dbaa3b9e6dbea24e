from .broadcast_gateway import BroadcastGateway
from .subscriber_registry import SubscriberRegistry
from .websocket_subscriber import TODOS_UPDATED_EVENT, WebSocketSubscriber

__all__ = [
    "TODOS_UPDATED_EVENT",
    "BroadcastGateway",
    "SubscriberRegistry",
    "WebSocketSubscriber",
]
