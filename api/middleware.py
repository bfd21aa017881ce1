"""Request tracing and access logging."""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

CallNext = Callable[[Request], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Probed constantly by orchestrators; logged at debug
PROBE_PATHS = frozenset({"/api/health", "/api/ready"})

logger = structlog.get_logger()


def resolve_request_id(header_value: str | None) -> str:
    """Reuse the caller's request ID when it is sane, otherwise mint one."""
    if header_value and len(header_value) <= MAX_REQUEST_ID_LENGTH and header_value.isprintable():
        return header_value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the log context and echo it on the response."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with its status and duration."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        start_time = time.perf_counter()
        log = logger.debug if request.url.path in PROBE_PATHS else logger.info

        response = await call_next(request)

        log(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
