"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain, framework and unexpected) and return a JSON body that always carries
a ``message`` field.

Design:
- AppError subclasses → appropriate HTTP status (400, 429, 500)
- RequestValidationError → 400 with the first failing rule
- HTTPException → its own status, reshaped to {"message": ...}
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError, LLMAppError, RateLimitAppError
from app.core.logging import get_request_id
from app.core.rate_limit import get_app_settings
from app.core.text_validation import first_error_message

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _rate_limit_headers(request: Request, exc: RateLimitAppError) -> dict[str, str]:
    details = exc.details or {}
    if not get_app_settings(request).rate_limit_include_headers:
        return {}

    headers = {"Retry-After": str(details.get("retry_after", 0))}
    for header, key in (
        ("X-RateLimit-Limit", "limit"),
        ("X-RateLimit-Remaining", "remaining"),
        ("X-RateLimit-Reset", "reset_at"),
    ):
        if key in details:
            headers[header] = str(details[key])
    return headers


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    Routes domain errors to HTTP status codes:
    - ValidationAppError → 400 Bad Request (client fault)
    - RateLimitAppError → 429 Too Many Requests, with retryAfter
    - LLMAppError → 500 Internal Server Error (provider fault)

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with ``{"message": ...}`` and the mapped status code.
    """
    status_code = 400
    headers: dict[str, str] = {}
    content: dict[str, object] = {"message": exc.message}

    if isinstance(exc, RateLimitAppError):
        status_code = 429
        content["retryAfter"] = (exc.details or {}).get("retry_after", 0)
        headers = _rate_limit_headers(request, exc)
    elif isinstance(exc, LLMAppError):
        status_code = 500

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers or None,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first schema violation as a 400 with a readable message."""
    errors = exc.errors()
    message = first_error_message(errors)

    logger.info(
        "request_validation_failed",
        extra={
            "error_type": errors[0].get("type") if errors else None,
            "error_count": len(errors),
            "request_path": request.url.path,
        },
    )

    return JSONResponse(status_code=400, content={"message": message})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Reshape framework HTTP errors (404, 405, ...) to the common body."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from app.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
