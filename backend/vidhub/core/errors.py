# vidhub/core/errors.py
"""
Uniform API error and response envelope.

Every handler either returns ``api_response(...)`` or raises ``ApiError``.
The handlers registered in ``register_error_handlers`` turn ApiError,
request-validation errors, Starlette HTTP errors and unexpected exceptions
into the same error envelope, so a request never ends with a partial body.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidhub.config import settings

logger = logging.getLogger("uvicorn.error")


class ApiError(Exception):
    """
    The single typed error raised by request handlers.

    Attributes:
        status_code: HTTP status code (400, 401, 404, 409, 500, ...)
        message: Human-readable error description
        errors: Optional list of field-level details
    """

    def __init__(self, status_code: int, message: str = "Something went wrong", errors: list | None = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "status": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


def api_response(status_code: int, data: Any, message: str = "Success") -> dict:
    """Build the success envelope: {status, data, message, success}."""
    return {
        "status": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[api] %s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Missing or ill-typed request fields are a plain 400 in this API
    err = ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        errors=jsonable_encoder(exc.errors()),
    )
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    err = ApiError(exc.status_code, message)
    return JSONResponse(status_code=exc.status_code, content=err.to_dict(), headers=getattr(exc, "headers", None))


async def error_handler_middleware(request: Request, call_next):
    """
    Outermost safety net: anything that escapes the exception handlers
    becomes a 500 envelope. Details are only exposed in dev.
    """
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception("[api] unhandled error on %s %s", request.method, request.url.path)
        err = ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            errors=[{"error": str(e)}] if settings.is_dev else [],
        )
        return JSONResponse(status_code=err.status_code, content=err.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.middleware("http")(error_handler_middleware)
