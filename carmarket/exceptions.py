"""
Error taxonomy and the handlers that render it as JSON.

Every error leaves the API as::

    {"success": false, "message": "...", "error_type": "..."}
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "server_error"
    default_message = "Internal server error. Please try again later."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "validation_error"
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "conflict"
    default_message = "Resource already exists"


class InvalidTransition(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "invalid_transition"
    default_message = "Status transition not allowed"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "unauthorized"
    default_message = "Not authorized"


class ServerError(AppError):
    pass


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error_type": error_type},
    )


async def handle_app_error(request: Request, exc: AppError):
    return error_response(exc.status_code, exc.message, exc.error_type)


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Report the first failing field the way a missing-field check would."""
    errors = exc.errors()
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    if fields:
        message = f"Invalid or missing fields: {', '.join(dict.fromkeys(fields))}"
    else:
        message = "Invalid request body"
    return error_response(status.HTTP_400_BAD_REQUEST, message, "validation_error")


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), "http_error")


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ServerError.default_message,
        ServerError.error_type,
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
