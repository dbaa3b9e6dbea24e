from realtime_todo.infrastructure.observability.logging.correlation_middleware import (
    CorrelationMiddleware,
)
from realtime_todo.infrastructure.observability.logging.schema_processor import (
    build_schema_processor,
)

__all__ = [
    "CorrelationMiddleware",
    "build_schema_processor",
]
