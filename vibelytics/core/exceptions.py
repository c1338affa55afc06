"""
Error taxonomy and FastAPI exception handlers.

Every failure the API reports maps to one of the classes below. Handlers
registered by ``register_exception_handlers`` render them into the
``{success, message, error?}`` envelope; the ``error`` field carries
diagnostic detail outside production only.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from vibelytics.config import settings
from vibelytics.utils.logging_config import get_logger

logger = get_logger(__name__)


class VibelyticsError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"
    headers: Optional[dict] = None

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        detail: Any = None,
    ):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)


# ---------------------------
# Validation (400)
# ---------------------------

class ValidationError(VibelyticsError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidMood(ValidationError):
    """Mood label outside the closed set."""

    message = "Invalid mood"


# ---------------------------
# Authentication (401)
# ---------------------------

class AuthenticationError(VibelyticsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication failed"
    headers = {"WWW-Authenticate": "Bearer"}


class Unauthenticated(AuthenticationError):
    message = "No token provided"


class TokenExpired(AuthenticationError):
    message = "Token expired"


class TokenInvalid(AuthenticationError):
    message = "Invalid token"


class UserNotFound(AuthenticationError):
    message = "User not found"


class InvalidCredentials(AuthenticationError):
    """Deliberately generic: never says which part of the credentials was wrong."""

    message = "Invalid email or password"


# ---------------------------
# Server side (500 / upstream)
# ---------------------------

class ConfigurationError(VibelyticsError):
    """A required secret or credential is not configured."""

    message = "Server configuration error"


class UpstreamUnavailable(VibelyticsError):
    """An external provider failed or answered with an unusable payload."""

    message = "External provider unavailable"


class PersistenceError(VibelyticsError):
    message = "Database error"


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def error_response(
    status_code: int,
    message: str,
    detail: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the error envelope, attaching ``error`` only outside production."""
    content = {"success": False, "message": message}
    if detail is not None and not settings.is_production:
        content["error"] = detail
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(VibelyticsError)
    async def vibelytics_error_handler(request: Request, exc: VibelyticsError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.__class__.__name__} on {request.method} {request.url.path}: "
                f"{exc.message} ({exc.detail})"
            )
        else:
            logger.info(
                f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}"
            )
        return error_response(exc.status_code, exc.message, exc.detail, exc.headers)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit hit on {request.method} {request.url.path}: {exc.detail}")
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Too many requests, please try again later",
            f"Rate limit exceeded: {exc.detail}",
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        fields = sorted({".".join(str(p) for p in e.get("loc", ())[1:]) or "body" for e in errors})
        message = f"Invalid or missing fields: {', '.join(fields)}"
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            message,
            [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return error_response(
            PersistenceError.status_code,
            PersistenceError.message,
            str(exc),
        )
