"""OpenTelemetry spans around the mutation service's operations.

Until configure_tracing() installs an SDK provider the global no-op provider
is active, so traced methods run unchanged in tests.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

AsyncMethod = Callable[..., Awaitable[Any]]

_tracer = trace.get_tracer("realtime_todo")
_CONFIGURED = False


def configure_tracing(service_name: str, environment: str) -> None:
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return
    _CONFIGURED = True

    resource = Resource.create(
        {"service.name": service_name, "deployment.environment": environment}
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)


def trace_operation(span_name: str) -> Callable[[AsyncMethod], AsyncMethod]:
    """Run an async service method inside a span.

    The span carries ``todo.operation`` and, when the method returns a todo,
    its ``todo.id``. Exceptions are recorded on the span and re-raised.
    """
    operation = span_name.rsplit(".", 1)[-1]

    def decorator(func: AsyncMethod) -> AsyncMethod:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with _tracer.start_as_current_span(span_name) as span:
                span.set_attribute("todo.operation", operation)
                result = await func(*args, **kwargs)
                todo_id = getattr(result, "id", None)
                if isinstance(todo_id, str):
                    span.set_attribute("todo.id", todo_id)
                return result

        return wrapper

    return decorator
