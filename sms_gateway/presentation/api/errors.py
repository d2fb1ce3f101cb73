"""Maps application errors onto the response envelope."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ...application.dtos import error_envelope
from ...application.exceptions import (
    ConcurrentUpdateError,
    MessageNotFoundError,
    PersistenceError,
    ValidationFailedError,
)
from ...domain.exceptions import InvalidStatusTransitionError

logger = structlog.get_logger()


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_envelope(str(exc.detail)))


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON is a bad request; well-formed but wrong fields are unprocessable."""
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        logger.warning("Cannot parse request body", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_envelope("the request body is not valid JSON"),
        )

    details = [
        {"field": ".".join(str(p) for p in e["loc"][1:]) or str(e["loc"][0]), "message": e["msg"]}
        for e in errors
    ]
    logger.warning("Request failed schema validation", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_envelope("validation errors while processing request", details),
    )


def validation_failed_handler(request: Request, exc: ValidationFailedError) -> JSONResponse:
    details = [{"field": e.field, "message": e.message} for e in exc.errors]
    logger.warning("Request failed validation", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_envelope("validation errors while processing request", details),
    )


def not_found_handler(request: Request, exc: MessageNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_envelope(str(exc)))


def conflict_handler(
    request: Request, exc: InvalidStatusTransitionError | ConcurrentUpdateError
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=error_envelope(str(exc)))


def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(
        "Persistence failure",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("internal server error"),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)
    app.add_exception_handler(MessageNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidStatusTransitionError, conflict_handler)
    app.add_exception_handler(ConcurrentUpdateError, conflict_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
