"""
Correlation ID middleware for request tracing.

The ID is taken from X-Request-ID (or X-Correlation-ID) when it looks safe,
generated otherwise, bound to every log record of the request and echoed in
the response headers. It also ends up in SQL comments, hence the strict
format check.
"""

import re
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...infrastructure.logging import Timer, set_correlation_id

logger = structlog.get_logger()

_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_correlation_id(request: Request) -> str:
    candidate = request.headers.get("X-Request-ID") or request.headers.get("X-Correlation-ID")
    if candidate and _VALID_ID.match(candidate):
        return candidate
    return str(uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = resolve_correlation_id(request)
        set_correlation_id(correlation_id)

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        ):
            with Timer() as t:
                response = await call_next(request)

            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=t.duration_ms,
            )

        response.headers["X-Request-ID"] = correlation_id
        return response
