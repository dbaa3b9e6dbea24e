from typing import Any

import httpx
import structlog

from realtime_todo.core.application.exceptions import (
    TodoAppError,
    TodoNotFoundError,
    TodoValidationError,
)
from realtime_todo.core.domain.todo import Todo
from realtime_todo.infrastructure.repositories.todo_document_model import TodoRecordModel

logger = structlog.get_logger()


class TodoClientError(TodoAppError):
    """The server answered with an unexpected status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message, context={"status_code": status_code})
        self.status_code = status_code


class TodoHttpClient:
    """REST client for the todo API.

    The client keeps no state of its own; the server's pushed snapshot is the
    source of truth, so every call returns what the server answered.
    """

    def __init__(self, base_url: str = "http://localhost:3001", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, todo_id: str | None = None) -> str:
        url = f"{self.base_url}/api/todos"
        return f"{url}/{todo_id}" if todo_id is not None else url

    def _request(self, method: str, url: str, json_data: dict[str, Any] | None = None) -> httpx.Response:
        with httpx.Client(timeout=self.timeout) as client:
            response = client.request(method, url, json=json_data)
        self._raise_for_status(response, url)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        if response.is_success:
            return
        message = _error_message(response)
        if response.status_code == 404:
            raise TodoNotFoundError(url.rsplit("/", 1)[-1])
        if response.status_code == 400:
            raise TodoValidationError(message)
        raise TodoClientError(message, status_code=response.status_code)

    def list_todos(self) -> list[Todo]:
        response = self._request("GET", self._url())
        return [TodoRecordModel.model_validate(item).to_domain() for item in response.json()]

    def create_todo(self, text: str) -> Todo:
        response = self._request("POST", self._url(), {"task": text.strip()})
        return TodoRecordModel.model_validate(response.json()).to_domain()

    def set_completed(self, todo_id: str, completed: bool) -> Todo:
        response = self._request("PUT", self._url(todo_id), {"completed": completed})
        return TodoRecordModel.model_validate(response.json()).to_domain()

    def toggle_todo(self, todo: Todo) -> Todo:
        return self.set_completed(todo.id, not todo.completed)

    def delete_todo(self, todo_id: str) -> None:
        self._request("DELETE", self._url(todo_id))

    def clear_completed(self) -> int:
        """Delete every completed task, one request each. Returns how many were removed.

        Each delete triggers its own broadcast, so subscribers see a sequence of
        shrinking lists. A task another client already removed is skipped.
        """
        removed = 0
        for todo in self.list_todos():
            if not todo.completed:
                continue
            try:
                self.delete_todo(todo.id)
                removed += 1
            except TodoNotFoundError:
                logger.info("Completed todo already removed", todo_id=todo.id)
        return removed


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "message" in body:
        return str(body["message"])
    return str(body)
