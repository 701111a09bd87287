"""
Error taxonomy and the handlers that turn errors into the JSON envelope.

Every failure response looks like:
    {"success": false, "message": "...", "error": "..."}

Services raise the JobBoardError subclasses below; they never build
responses themselves.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from jobboard.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class JobBoardError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class BadRequestError(JobBoardError):
    status_code = 400


class NotAuthenticatedError(JobBoardError):
    """No credential was presented at all."""
    status_code = 400


class UnauthorizedError(JobBoardError):
    """A credential was presented but is invalid or expired."""
    status_code = 401


class ForbiddenError(JobBoardError):
    status_code = 403


class NotFoundError(JobBoardError):
    status_code = 404


class ConflictError(JobBoardError):
    status_code = 409


def error_body(message: str, error: Optional[Any] = None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


def _describe_validation_errors(errors: list) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


async def jobboard_error_handler(request: Request, exc: JobBoardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(
            "All required fields must be provided and valid",
            _describe_validation_errors(exc.errors()),
        ),
    )


async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(
            "Validation failed",
            _describe_validation_errors(exc.errors()),
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(
            "Internal Server Error. Please try again later.",
            str(exc) if settings.debug else None,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the app."""
    app.add_exception_handler(JobBoardError, jobboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, model_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
