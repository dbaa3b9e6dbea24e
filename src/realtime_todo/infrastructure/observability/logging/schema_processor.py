"""Reshapes flat structlog events into the service's nested log document.

Root fields carry identity and correlation; the ``request``, ``todo``,
``push`` and ``error`` blocks appear only when the event has their keys.
Anything left over lands in ``extra``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from opentelemetry import trace

EventDict = dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

_REQUEST_KEYS = {
    "context_endpoint": "endpoint",
    "context_method": "method",
    "status_code": "status_code",
    "processing_status": "outcome",
    "processing_duration_ms": "duration_ms",
}
_TODO_KEYS = {"todo_id": "id", "completed": "completed"}
_PUSH_KEYS = {
    "subscriber_id": "subscriber_id",
    "subscribers": "subscribers",
    "todos": "snapshot_size",
    "delivered": "delivered",
    "failed": "failed",
}
_ERROR_KEYS = {"error_type": "type", "error_details": "details", "error_retryable": "retryable"}

_BLOCKS = (
    ("request", _REQUEST_KEYS),
    ("todo", _TODO_KEYS),
    ("push", _PUSH_KEYS),
    ("error", _ERROR_KEYS),
)


def _pop_block(event_dict: EventDict, keys: dict[str, str]) -> dict[str, Any]:
    return {name: event_dict.pop(key) for key, name in keys.items() if key in event_dict}


def _inject_span_ids(event_dict: EventDict) -> None:
    """Prefer the active OTel span's ids over the middleware's generated trace_id."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")


def build_schema_processor(service: str, environment: str) -> Processor:
    def log_schema_processor(
        logger: Any,  # noqa: ARG001
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        _inject_span_ids(event_dict)
        document: EventDict = {
            "timestamp": event_dict.pop("timestamp", None),
            "level": event_dict.pop("level", method_name),
            "service": service,
            "environment": environment,
            "message": event_dict.pop("event", ""),
            "correlation_id": event_dict.pop("correlation_id", None),
            "trace_id": event_dict.pop("trace_id", None),
            "span_id": event_dict.pop("span_id", None),
        }
        if "event_type" in event_dict:
            document["event_type"] = event_dict.pop("event_type")
        if "context_component" in event_dict:
            document["component"] = event_dict.pop("context_component")

        for name, keys in _BLOCKS:
            block = _pop_block(event_dict, keys)
            if block:
                document[name] = block

        if event_dict:
            document["extra"] = dict(event_dict)
        return document

    return log_schema_processor
