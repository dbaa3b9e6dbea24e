"""Pure ASGI middleware for correlation/trace ID propagation via structlog contextvars.

Injects correlation_id, trace_id, endpoint, and method into structlog context
for every HTTP/WebSocket request. Logs request completion with duration; for
the push channel that is the moment the socket closes.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

_WEBSOCKET_ACCEPTED = 101
_WEBSOCKET_REJECTED = 403


class CorrelationMiddleware:
    """ASGI middleware that binds correlation/trace IDs to structlog contextvars."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return
        await self._handle_request(scope, receive, send)

    async def _handle_request(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        clear_contextvars()
        self._bind_request_context(scope)
        status_code = 500
        start = time.perf_counter()
        try:
            status_code = await self._dispatch_and_capture_status(scope, receive, send)
        finally:
            await self._log_request_completion(status_code, start)

    @staticmethod
    def _bind_request_context(scope: dict[str, Any]) -> None:
        correlation_id = _extract_header(scope, b"x-correlation-id") or str(uuid4())
        bind_contextvars(
            correlation_id=correlation_id,
            trace_id=str(uuid4()),
            context_endpoint=_extract_path(scope),
            context_method=_extract_method(scope),
        )

    async def _dispatch_and_capture_status(
        self, scope: dict[str, Any], receive: Any, send: Any
    ) -> int:
        """Dispatch the ASGI app and capture the response status code."""
        status_code = 500

        async def _capture_status(message: dict[str, Any]) -> None:
            nonlocal status_code
            message_type = message.get("type")
            if message_type == "http.response.start":
                status_code = message.get("status", 500)
            elif message_type == "websocket.accept":
                status_code = _WEBSOCKET_ACCEPTED
            elif message_type == "websocket.close" and status_code != _WEBSOCKET_ACCEPTED:
                status_code = _WEBSOCKET_REJECTED
            await send(message)

        await self.app(scope, receive, _capture_status)
        return status_code

    @staticmethod
    async def _log_request_completion(status_code: int, start: float) -> None:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        status_label = "SUCCESS" if status_code < 400 else "ERROR"
        await logger.ainfo(
            "Request processed",
            processing_status=status_label,
            processing_duration_ms=duration_ms,
            status_code=status_code,
        )


def _extract_header(scope: dict[str, Any], name: bytes) -> str | None:
    """Extract a header value from ASGI scope (case-insensitive)."""
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    lower_name = name.lower()
    for key, value in headers:
        if key.lower() == lower_name:
            return value.decode("latin-1")
    return None


def _extract_path(scope: dict[str, Any]) -> str:
    return str(scope.get("path", "/"))


def _extract_method(scope: dict[str, Any]) -> str:
    """HTTP method, or WEBSOCKET for the push channel."""
    if scope["type"] == "websocket":
        return "WEBSOCKET"
    return str(scope.get("method", "UNKNOWN"))
