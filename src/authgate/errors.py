"""HTTP error responses.

Learn: Every error leaves the API in the same shape:
    {"success": false, "message": "...", ...extra}
Routes raise ApiError; domain exceptions that reach the top are mapped
here; anything unexpected becomes an opaque 500. Stack traces go to the
log, never to the caller (in development the exception message is
included to make debugging easier).
"""

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from authgate.auth.password import HashingError
from authgate.config import settings
from authgate.store.base import StoreUnavailable

logger = structlog.get_logger()

API_ENDPOINTS = {
    "authentication": [
        "POST /api/auth/register - Register new user",
        "POST /api/auth/login - Login user",
        "GET /api/auth/me - Get user profile",
    ],
    "system": [
        "GET /api/health - Server health check",
        "GET /api/docs - API documentation",
    ],
}


class ApiError(Exception):
    """An error with a status code and a caller-safe message."""

    def __init__(
        self,
        status_code: int,
        message: str,
        headers: Optional[dict[str, str]] = None,
        **extra: Any,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers
        self.extra = extra


def error_response(
    status_code: int,
    message: str,
    headers: Optional[dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.headers, **exc.extra)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are client errors: 400, not FastAPI's default 422."""
    errors = [err.get("msg", "Invalid value") for err in exc.errors()]
    return error_response(400, "Validation failed", errors=errors)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and request.url.path.startswith("/api/"):
        return error_response(
            404,
            "API endpoint not found",
            error=f"The endpoint {request.method} {request.url.path} does not exist",
            available_endpoints=API_ENDPOINTS,
        )
    return error_response(exc.status_code, str(exc.detail), exc.headers)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api.unhandled_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    extra: dict[str, Any] = {"path": request.url.path, "method": request.method}
    if settings.environment == "development":
        extra["error"] = str(exc)
    return error_response(500, "Internal server error", **extra)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(HashingError, internal_error_handler)
    app.add_exception_handler(StoreUnavailable, internal_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
