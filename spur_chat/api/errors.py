"""Mapping from domain errors to HTTP responses.

This is the only place that knows status codes. Every error body has the
shape ``{"error": str, "status": int}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from spur_chat.exceptions import ChatError, ErrorKind
from spur_chat.models.conversation import ErrorResponse
from spur_chat.utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM_AUTH: 500,
    ErrorKind.UPSTREAM_BUSY: 503,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
    ErrorKind.EMPTY_REPLY: 500,
    ErrorKind.UPSTREAM: 500,
    ErrorKind.STORAGE_REFERENCE: 400,
    ErrorKind.STORAGE_CONFLICT: 409,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.INTERNAL: 500,
}


def status_for(error: ChatError) -> int:
    """HTTP status code for a domain error."""
    return STATUS_BY_KIND.get(error.error_kind, 500)


def error_response(message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=message, status=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed with {exc.error_kind} "
            f"(retryable={exc.retryable}): {exc.message} {exc.details}",
            exc_info=exc,
        )
    else:
        logger.warning(f"{request.method} {request.url.path} rejected with {exc.error_kind}: {exc.message}")
    return error_response(exc.message, status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning(f"{request.method} {request.url.path} invalid request: {errors}")

    if any(err.get("type") == "json_invalid" for err in errors):
        message = "Invalid JSON in request body"
    elif any("message" in err.get("loc", ()) for err in errors):
        message = "Message must be a string"
    else:
        message = "Invalid request body"
    return error_response(message, 400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return error_response(message, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return error_response(GENERIC_ERROR_MESSAGE, 500)


def register_exception_handlers(app: FastAPI) -> None:
    """Install every error handler on the application."""
    app.add_exception_handler(ChatError, chat_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
