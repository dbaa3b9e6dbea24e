import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from realtime_todo.core.application.exceptions import (
    TodoNotFoundError,
    TodoStorageError,
    TodoValidationError,
)
from realtime_todo.infrastructure.configuration.main_settings import Settings
from realtime_todo.infrastructure.entrypoints.api.health_router import router as health_router
from realtime_todo.infrastructure.entrypoints.api.push_channel_router import (
    router as push_channel_router,
)
from realtime_todo.infrastructure.entrypoints.api.todo_router import router as todo_router
from realtime_todo.infrastructure.observability.logger_factory_service import (
    configure_logging,
    get_logger,
)
from realtime_todo.infrastructure.observability.logging import CorrelationMiddleware
from realtime_todo.infrastructure.observability.tracing_setup import configure_tracing
from realtime_todo.infrastructure.resolution.container import (
    build_broadcast_gateway,
    build_todo_service,
)

logger = structlog.get_logger()

_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE"]


def create_app(settings: Settings) -> FastAPI:
    configure_logging(
        settings.log_level,
        service=settings.app_name,
        environment=settings.env,
        log_format=settings.log_format,
    )
    if settings.tracing_enabled:
        configure_tracing(settings.app_name, settings.env)

    get_logger("app_factory").info(
        "Boot diagnostics",
        app_name=settings.app_name,
        env=settings.env,
        todo_db_path=str(settings.todo_db_path),
        cors_allowed_origin=settings.cors_allowed_origin,
    )

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.broadcast_gateway = build_broadcast_gateway(settings)
    app.state.todo_service = build_todo_service(settings, app.state.broadcast_gateway)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_allowed_origin],
        allow_methods=_ALLOWED_METHODS,
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationMiddleware)

    _register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(todo_router)
    app.include_router(push_channel_router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request body", url=str(request.url), error_details=exc.errors())
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder({"detail": exc.errors(), "body": exc.body}),
        )

    @app.exception_handler(TodoNotFoundError)
    async def not_found_handler(request: Request, exc: TodoNotFoundError):
        logger.info("Todo not found", todo_id=exc.todo_id, context_method=request.method)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})

    @app.exception_handler(TodoValidationError)
    async def invalid_todo_handler(request: Request, exc: TodoValidationError):
        logger.info("Rejected todo payload", error_details=exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message}
        )

    @app.exception_handler(TodoStorageError)
    async def storage_error_handler(request: Request, exc: TodoStorageError):
        logger.error(
            "Todo storage failure",
            error_type=type(exc).__name__,
            error_details=exc.message,
            error_retryable=False,
            **exc.context,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Todo storage is unavailable"},
        )
