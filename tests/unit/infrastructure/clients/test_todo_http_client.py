import json

import httpx
import pytest
import respx

from realtime_todo.core.application.exceptions import TodoNotFoundError, TodoValidationError
from realtime_todo.infrastructure.clients import TodoClientError, TodoHttpClient

BASE_URL = "http://todo.test"
TODOS_URL = f"{BASE_URL}/api/todos"


def _record(todo_id: str, completed: bool = False, task: str = "Buy milk") -> dict:
    return {
        "id": todo_id,
        "task": task,
        "completed": completed,
        "createdAt": "2024-05-01T09:30:00.000000Z",
    }


@pytest.fixture
def client():
    return TodoHttpClient(base_url=BASE_URL + "/")


@respx.mock
def test_list_todos_parses_records(client):
    respx.get(TODOS_URL).mock(return_value=httpx.Response(200, json=[_record("a"), _record("b")]))

    todos = client.list_todos()

    assert [todo.id for todo in todos] == ["a", "b"]
    assert todos[0].description == "Buy milk"


@respx.mock
def test_create_todo_sends_trimmed_text(client):
    route = respx.post(TODOS_URL).mock(return_value=httpx.Response(201, json=_record("a")))

    todo = client.create_todo("  Buy milk  ")

    assert json.loads(route.calls.last.request.content) == {"task": "Buy milk"}
    assert todo.id == "a"


@respx.mock
def test_toggle_flips_completed_flag(client):
    route = respx.put(f"{TODOS_URL}/a").mock(
        return_value=httpx.Response(200, json=_record("a", completed=True))
    )
    respx.get(TODOS_URL).mock(return_value=httpx.Response(200, json=[_record("a")]))
    (original,) = client.list_todos()

    toggled = client.toggle_todo(original)

    assert json.loads(route.calls.last.request.content) == {"completed": True}
    assert toggled.completed is True


@respx.mock
def test_not_found_maps_to_domain_error(client):
    respx.delete(f"{TODOS_URL}/ghost").mock(
        return_value=httpx.Response(404, json={"message": "Todo not found"})
    )

    with pytest.raises(TodoNotFoundError) as exc_info:
        client.delete_todo("ghost")

    assert exc_info.value.todo_id == "ghost"


@respx.mock
def test_bad_request_maps_to_validation_error(client):
    respx.post(TODOS_URL).mock(
        return_value=httpx.Response(400, json={"message": "Task text cannot be empty."})
    )

    with pytest.raises(TodoValidationError, match="cannot be empty"):
        client.create_todo("x")


@respx.mock
def test_server_error_maps_to_client_error(client):
    respx.get(TODOS_URL).mock(
        return_value=httpx.Response(500, json={"message": "Todo storage is unavailable"})
    )

    with pytest.raises(TodoClientError) as exc_info:
        client.list_todos()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Todo storage is unavailable"


@respx.mock
def test_clear_completed_deletes_each_completed_todo(client):
    respx.get(TODOS_URL).mock(
        return_value=httpx.Response(
            200,
            json=[_record("a", completed=True), _record("b"), _record("c", completed=True)],
        )
    )
    delete_a = respx.delete(f"{TODOS_URL}/a").mock(return_value=httpx.Response(204))
    delete_b = respx.delete(f"{TODOS_URL}/b").mock(return_value=httpx.Response(204))
    # Already removed by another client
    delete_c = respx.delete(f"{TODOS_URL}/c").mock(
        return_value=httpx.Response(404, json={"message": "Todo not found"})
    )

    removed = client.clear_completed()

    assert removed == 1
    assert delete_a.called
    assert delete_c.called
    assert not delete_b.called
