"""Translate exceptions into ``{"error": ...}`` JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from confession_wall.core.errors import InputValidationError, NotFoundError, StoreError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def _input_validation_handler(_request: Request, exc: InputValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def _not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def _store_error_handler(_request: Request, exc: StoreError) -> JSONResponse:
    # Message is set by the repository and carries no driver detail.
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def _sqlalchemy_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Unhandled database error on %s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def _http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on ``app``."""
    app.add_exception_handler(InputValidationError, _input_validation_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    # Runs in ServerErrorMiddleware, which re-raises after sending the response
    app.add_exception_handler(Exception, _unhandled_error_handler)
