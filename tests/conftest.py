import shutil
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from realtime_todo.infrastructure.configuration.main_settings import Settings
from realtime_todo.infrastructure.entrypoints.api.app_factory import create_app


@pytest.fixture
def temp_workspace():
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp)


@pytest.fixture
def settings(temp_workspace):
    return Settings(
        app_name="TestTodo",
        runtime_data_dir=temp_workspace / "runtime_data",
        cors_allowed_origin="http://localhost:3000",
        broadcast_send_timeout_seconds=1.0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # One portal for the whole test so HTTP calls and WebSocket sessions share an event loop
    with TestClient(app) as test_client:
        yield test_client
