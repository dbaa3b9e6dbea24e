"""Structlog setup, bridged to stdlib logging so uvicorn's records share the
same schema and renderer as the service's own events."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from realtime_todo.infrastructure.observability.logging.schema_processor import (
    build_schema_processor,
)

_JSON_ENVIRONMENTS = frozenset({"qa", "staging", "prod", "production"})
_CONFIGURED = False


def configure_logging(
    level: str = "INFO",
    *,
    service: str = "realtime-todo",
    environment: str = "local",
    log_format: str = "auto",
) -> None:
    """Only the first call takes effect; later apps in the same process reuse it."""
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return
    _CONFIGURED = True

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        build_schema_processor(service, environment),
    ]
    renderer = _select_renderer(log_format, environment)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *processors,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger().bind(context_component=component)


def _select_renderer(log_format: str, environment: str) -> Any:
    log_format = log_format.lower()
    if log_format == "auto":
        log_format = "json" if environment.lower() in _JSON_ENVIRONMENTS else "console"
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
