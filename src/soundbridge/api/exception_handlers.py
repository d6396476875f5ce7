"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions
and validation errors into JSON responses of the form
`{"success": false, "error": "<message>"}` with appropriate status codes.

Hey future me - upstream Spotify errors are NOT handled here! The callback
route turns them into app redirects (?error=authentication_failed). Anything
reaching these handlers is either a client mistake or our own problem.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from soundbridge.domain.exceptions import (
    ConfigurationError,
    DatabaseUnavailableError,
    SessionCodeNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: Any) -> JSONResponse:
    """Build the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


# Hey future me, this registers GLOBAL exception handlers for the entire app! Without it,
# domain exceptions would leak as bare 500s. Call it during app setup, BEFORE any requests.
def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers for domain and validation exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Handle missing/invalid client input with 400 Bad Request."""
        logger.info(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(SessionCodeNotFoundException)
    async def session_code_not_found_handler(
        request: Request, exc: SessionCodeNotFoundException
    ) -> JSONResponse:
        """Handle unknown/expired/consumed session codes with 404 Not Found."""
        return error_response(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(DatabaseUnavailableError)
    async def database_unavailable_handler(
        request: Request, exc: DatabaseUnavailableError
    ) -> JSONResponse:
        """Handle datastore failures with a generic 500."""
        # Driver details were already logged by Database.ping()
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle configuration errors with 503 Service Unavailable."""
        logger.error(
            "Configuration error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors with 400 Bad Request."""
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.info(
            "Request validation failed at %s: %s",
            request.url.path,
            message,
            extra={"path": request.url.path, "error_count": len(errors)},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions with proper logging."""
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "HTTP error %d at %s: %s",
            exc.status_code,
            request.url.path,
            exc.detail,
            extra={
                "path": request.url.path,
                "status_code": exc.status_code,
                "detail": exc.detail,
            },
        )
        return error_response(exc.status_code, exc.detail)
