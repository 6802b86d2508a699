"""
Request Context Middleware.

Every request gets a request id bound into structlog contextvars, so
forecast fetches, purchases and settlements logged by the session carry
it. The id is echoed in X-Request-ID together with X-Response-Time.

An upstream X-Request-ID is honoured only when it is short and printable;
anything else is replaced by a fresh UUID.
"""

import time
import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

MAX_REQUEST_ID_LENGTH = 64
QUIET_PATHS = frozenset({"/health"})


def resolve_request_id(header_value: str | None) -> str:
    if header_value and len(header_value) <= MAX_REQUEST_ID_LENGTH and header_value.isprintable():
        return header_value
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"

        # Liveness probes only at debug
        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        log("request_completed", status=response.status_code, elapsed_ms=elapsed_ms)
        return response
