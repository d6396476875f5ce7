"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so handlers can render it without
    # parsing str(exception). Don't raise this directly - pick a subclass so callers and
    # the exception handlers can tell client errors from upstream failures.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(DomainException):
    """Raised when client input is missing or malformed.

    HTTP Status: 400
    """

    pass


class SessionCodeNotFoundException(DomainException):
    """Raised when a session code is unknown, expired or already consumed.

    HTTP Status: 404
    """

    def __init__(self, message: str = "Invalid or expired session code") -> None:
        super().__init__(message)


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when required configuration is missing or invalid.

    HTTP Status: 503

    Example:
        raise ConfigurationError("SPOTIFY_CLIENT_ID is not configured")
    """

    pass


class ExternalServiceError(DomainException):
    """External service returned an error or could not be reached.

    Never rendered to end users as-is; details only go to the logs.
    """

    pass


class SpotifyAuthError(ExternalServiceError):
    """Spotify token exchange or profile fetch failed.

    Hey future me - the callback route turns this into the generic
    `?error=authentication_failed` redirect. Keep upstream details in
    `status_code`/`message` for logging, never in the redirect.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DatabaseUnavailableError(DomainException):
    """Database connectivity check failed.

    HTTP Status: 500
    """

    def __init__(self, message: str = "Database connection failed") -> None:
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "DatabaseUnavailableError",
    "DomainException",
    "ExternalServiceError",
    "SessionCodeNotFoundException",
    "SpotifyAuthError",
    "ValidationException",
]
