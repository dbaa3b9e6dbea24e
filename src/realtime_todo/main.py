import uvicorn

from realtime_todo.infrastructure.configuration.main_settings import Settings
from realtime_todo.infrastructure.entrypoints.api.app_factory import create_app


def dev():
    """Run the development server with auto-reload."""
    settings = Settings()
    uvicorn.run(
        "realtime_todo.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


def serve():
    """Run the server."""
    settings = Settings()
    uvicorn.run(
        "realtime_todo.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# Instantiate global app for ASGI
settings = Settings()
app = create_app(settings)
