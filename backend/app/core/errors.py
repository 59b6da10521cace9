"""
Application errors and the handlers that turn them into JSON responses.

Every error body has the same shape::

    {"status": "fail", "code": "NOT_FOUND", "message": "...", "details": {...}}

``status`` is ``fail`` for client errors and ``error`` for server errors.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(self, status_code: int, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def error_body(status_code: int, code: str, message: str, details: Any = None) -> dict[str, Any]:
    return {
        "status": "fail" if status_code < 500 else "error",
        "code": code,
        "message": message,
        "details": details,
    }


def _json(status_code: int, code: str, message: str, details: Any = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_body(status_code, code, message, details)),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _json(exc.status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _json(400, "INVALID_ARGUMENTS", "Invalid request data", exc.errors())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _json(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail), headers=getattr(exc, "headers", None))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _json(400, "DUPLICATE_KEYS", "A record with the same unique value already exists")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _json(500, "INTERNAL_SERVER_ERROR", "Something went wrong")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def not_found(resource: str, resource_id: Any) -> AppError:
    return AppError(404, "NOT_FOUND", f"{resource} with ID {resource_id} not found", {"id": resource_id})
