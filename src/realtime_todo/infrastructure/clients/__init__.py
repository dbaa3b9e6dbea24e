from .todo_http_client import TodoClientError, TodoHttpClient

__all__ = ["TodoClientError", "TodoHttpClient"]
