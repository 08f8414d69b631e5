"""Translate service and request validation errors into HTTP responses."""

from collections.abc import Mapping
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pizzaparty.services.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceError,
    UnavailableError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Checked in order; first matching base class wins
STATUS_CODES: list[tuple[type[ServiceError], int]] = [
    (NotFoundError, 404),
    (ValidationError, 422),
    (ConflictError, 409),
    (UnavailableError, 503),
]


def status_code_for(exc: ServiceError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


def _error_response(request: Request, status_code: int, kind: str, detail: str) -> JSONResponse:
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request rejected",
        method=request.method,
        path=request.url.path,
        error=kind,
        detail=detail,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail, "error": kind})


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a ServiceError as {"detail": ..., "error": kind}."""
    assert isinstance(exc, ServiceError)
    return _error_response(request, status_code_for(exc), exc.kind, str(exc))


def _format_validation_error(error: Mapping[str, Any]) -> str:
    # "body" is implied for JSON payloads
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = str(error.get("msg", "Invalid value"))
    return f"{location}: {message}" if location else message


async def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a malformed request as an invalid_input error with a single message."""
    assert isinstance(exc, RequestValidationError)
    detail = "; ".join(_format_validation_error(error) for error in exc.errors())
    return _error_response(request, 422, ValidationError.kind, detail or "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
