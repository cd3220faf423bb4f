"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from src.domain.errors import InternalError, ServiceDeskError

logger = structlog.get_logger()


def error_response(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"error": message, **extra}),
    )


async def service_error_handler(request: Request, exc: ServiceDeskError) -> JSONResponse:
    """Map a domain error to its status code and user-facing message."""
    if exc.status_code >= 500:
        logger.error("service_error", error_type=type(exc).__name__, exc_info=exc)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and query strings are client errors (400)."""
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        detail=exc.errors(),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log the storage failure and hide its details from the caller."""
    logger.error("storage_error", error_type=type(exc).__name__, exc_info=exc)
    return error_response(InternalError.status_code, InternalError.default_message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", error_type=type(exc).__name__, exc_info=exc)
    return error_response(InternalError.status_code, InternalError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error-to-response mapping to the FastAPI application."""
    app.add_exception_handler(ServiceDeskError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
