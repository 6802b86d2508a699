"""
Error handling for the HTTP layer.

- PitchCoverError → its own status code and structured body
- Anything else → generic 500 with an error_id; never leaks stack traces,
  exception types, or internal paths to clients
"""

import traceback
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pitchcover.config import settings
from pitchcover.exceptions import PitchCoverError

logger = structlog.get_logger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Outermost middleware: catches everything the routes did not handle."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            error_id = str(uuid.uuid4())
            logger.error(
                "unhandled_exception",
                error_id=error_id,
                path=request.url.path,
                method=request.method,
                error=str(exc),
                traceback=traceback.format_exc(),
            )

            body: dict = {
                "error": "An internal error occurred. Please try again later.",
                "error_id": error_id,
                "status": 500,
            }
            if settings.debug:
                body["debug_hint"] = type(exc).__name__

            return JSONResponse(status_code=500, content=body)


async def pitchcover_exception_handler(request: Request, exc: PitchCoverError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    log = logger.warning if exc.status_code < 500 or exc.retryable else logger.error
    log(
        "pitchcover_error",
        error_code=exc.code.value,
        message=exc.message,
        status_code=exc.status_code,
        retryable=exc.retryable,
        details=exc.details,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response(request_id).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PitchCoverError, pitchcover_exception_handler)
