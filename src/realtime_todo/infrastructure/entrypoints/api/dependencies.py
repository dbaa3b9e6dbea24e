from starlette.requests import HTTPConnection

from realtime_todo.core.application.services import TodoMutationService


def get_todo_service(connection: HTTPConnection) -> TodoMutationService:
    """Shared per-app service; works for both HTTP requests and WebSocket sessions."""
    return connection.app.state.todo_service
