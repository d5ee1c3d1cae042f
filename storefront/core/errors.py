# storefront/core/errors.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger("storefront.errors")


class AppError(Exception):
    """Application error carrying a client-facing message and an HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


def request_id(request: Request) -> str:
    # Prefer the id assigned by the request-context middleware, then the headers.
    rid = getattr(request.state, "request_id", None)
    return (
        rid
        or request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


def error_response(request: Request, status_code: int, message: str, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"status": "error", "message": message}
    content.update(extra)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(content),
        headers={"X-Request-ID": request_id(request)},
    )


async def _app_error_handler(request: Request, exc: AppError):
    return error_response(request, exc.status_code, exc.message)


async def _validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    fields = sorted({str(e["loc"][-1]) for e in errors if e.get("loc")})
    message = "Invalid request"
    if fields:
        message = f"Invalid request: {', '.join(fields)}"
    return error_response(request, status.HTTP_400_BAD_REQUEST, message, errors=errors)


async def _integrity_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error: %s", getattr(exc, "orig", exc))
    return error_response(request, status.HTTP_409_CONFLICT, "Integrity constraint violated")


async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Can't find {request.url.path} on this server"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method Not Allowed"
    response = error_response(request, exc.status_code, message)
    for k, v in (exc.headers or {}).items():
        response.headers.setdefault(k, v)
    return response


async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"status": "error", "message": ...}."""
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(IntegrityError, _integrity_handler)
    app.add_exception_handler(StarletteHTTPException, _starlette_http_exc_handler)
    app.add_exception_handler(Exception, _unhandled_exc_handler)


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "error_response",
    "register_exception_handlers",
    "request_id",
]
