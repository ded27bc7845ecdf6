"""
Exception handlers mapping the service error taxonomy to HTTP responses.

Every error body carries the error kind and the request's correlation id.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlinks.api.dependencies import get_log_id
from shortlinks.core.exceptions import (
    DuplicateShortCodeError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
    StorageError,
    URLShortenerException,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    InvalidURLError: status.HTTP_400_BAD_REQUEST,
    InvalidShortCodeError: status.HTTP_400_BAD_REQUEST,
    DuplicateShortCodeError: status.HTTP_409_CONFLICT,
    ShortCodeNotFoundError: status.HTTP_404_NOT_FOUND,
    ShortCodeExpiredError: status.HTTP_410_GONE,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

PUBLIC_MESSAGES = {
    StorageError: "Could not complete the request due to a storage failure.",
}


def status_for(exc: URLShortenerException) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(log_id: str, kind: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"logID": log_id, "kind": kind, "error": message},
    )


async def handle_service_error(request: Request, exc: URLShortenerException) -> JSONResponse:
    status_code = status_for(exc)
    message = str(exc)
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc.original_error)
        message = PUBLIC_MESSAGES[StorageError]
    return error_response(get_log_id(request), exc.kind, message, status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        get_log_id(request),
        "invalid_request",
        "Malformed request body.",
        status.HTTP_400_BAD_REQUEST,
    )


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(URLShortenerException, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
