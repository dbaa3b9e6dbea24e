"""Functional DI container: builds the fully-wired mutation service."""

from realtime_todo.core.application.services import TodoMutationService
from realtime_todo.infrastructure.broadcast import BroadcastGateway
from realtime_todo.infrastructure.configuration.main_settings import Settings
from realtime_todo.infrastructure.repositories import TodoStoreFileAdapter


def build_broadcast_gateway(settings: Settings) -> BroadcastGateway:
    return BroadcastGateway(send_timeout_seconds=settings.broadcast_send_timeout_seconds)


def build_todo_service(settings: Settings, gateway: BroadcastGateway) -> TodoMutationService:
    store = TodoStoreFileAdapter(settings.todo_db_path)
    return TodoMutationService(store=store, publisher=gateway)
