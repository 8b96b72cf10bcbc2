"""Exception handlers that render every failure as a JSON error envelope."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.modules.auth.exceptions import (
    AuthenticationError,
    AuthError,
    BadRequestError,
    ConflictError,
    FieldError,
    ValidationError,
)
from src.modules.auth.schemas import ErrorResponse, FieldErrorResponse
from src.modules.auth.validation import field_errors

logger = structlog.get_logger()

_STATUS_BY_ERROR: dict[type[AuthError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
}


def error_response(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a ``{success: false, message, errors?}`` response."""
    body = ErrorResponse(
        message=message,
        errors=[FieldErrorResponse(field=e.field, message=e.message) for e in errors]
        if errors
        else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _status_for(exc: AuthError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]  # type: ignore[index]
    return status.HTTP_400_BAD_REQUEST


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Map domain errors to their HTTP status."""
    status_code = _status_for(exc)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    return error_response(
        status_code,
        exc.message,
        errors=exc.errors if isinstance(exc, ValidationError) else None,
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body validation failures with per-field messages."""
    errors = field_errors(exc.errors())
    logger.info(
        "request_validation_failed",
        path=request.url.path,
        fields=[e.field for e in errors],
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors
    )


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404, 405...) in the error envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=exc.headers)


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Log unexpected failures and return a generic 500."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all JSON error handlers on an application."""
    app.add_exception_handler(AuthError, auth_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        StarletteHTTPException,
        http_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
