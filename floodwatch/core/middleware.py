"""
Request context and error envelope middleware.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from floodwatch.core.exceptions import AppException, create_http_exception

logger = logging.getLogger(__name__)

# Read by the logging filter so every record carries the request id
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Polled by probes and scrapers; not worth a log line each
QUIET_PATHS = frozenset({"/health", "/metrics"})


def error_response(
    request_id: str,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the JSON error envelope shared by every failing request."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details,
                "request_id": request_id,
                "status_code": status_code,
            }
        },
        headers={"X-Request-ID": request_id, **(headers or {})},
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request id and logs each request with its outcome.
    Must wrap ErrorHandlingMiddleware so the id is set before errors are built.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = request_id_context.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            if request.url.path not in QUIET_PATHS:
                elapsed_ms = (time.perf_counter() - started) * 1000
                logger.info(
                    f"{request.method} {request.url.path} -> {response.status_code} "
                    f"({elapsed_ms:.1f} ms)"
                )
        finally:
            request_id_context.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping a handler into the JSON error envelope."""

    async def dispatch(self, request: Request, call_next):
        request_id = request_id_context.get() or uuid.uuid4().hex

        try:
            return await call_next(request)

        except AppException as exc:
            http_exc = create_http_exception(exc)
            logger.warning(f"{exc.__class__.__name__}: {exc.message}")
            return error_response(
                request_id,
                http_exc.status_code,
                exc.__class__.__name__,
                http_exc.detail,
                exc.details,
                http_exc.headers,
            )

        except StarletteHTTPException as exc:
            return error_response(
                request_id, exc.status_code, "HTTPException", exc.detail
            )

        except Exception as exc:
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            debug = logging.getLogger().isEnabledFor(logging.DEBUG)
            return error_response(
                request_id,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "InternalServerException",
                "An unexpected error occurred.",
                str(exc) if debug else None,
            )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render FastAPI's request validation errors in the shared envelope."""
    invalid = [
        {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(
        request_id_context.get() or uuid.uuid4().hex,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationException",
        "Invalid request",
        {"invalid": invalid},
    )
