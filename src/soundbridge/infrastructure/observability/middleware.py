"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from soundbridge.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


# Hey future me, this middleware logs EVERY HTTP request ONCE, on completion! We extend
# BaseHTTPMiddleware which handles the FastAPI integration magic. We log the path only -
# NEVER the query string: /auth/exchange?code=... and the Spotify callback carry bearer
# codes. This middleware is stateless - safe for concurrent requests.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    # Yo, flow: 1) take correlation_id from header (or generate one), 2) set it in context so
    # ALL logs for this request inherit it, 3) call the route, 4) log status + duration,
    # 5) echo correlation_id in the response header. Exceptions get logged and re-raised.
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from application
        """
        correlation_id = request.headers.get("X-Correlation-ID")
        set_correlation_id(correlation_id)

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                f"✗ {method} {path} FAILED ({duration_ms:.0f}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "client_ip": client_ip,
                    "duration_ms": int(duration_ms),
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_emoji = "✓" if response.status_code < 400 else "✗"
        logger.info(
            f"{status_emoji} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
            extra={
                "method": method,
                "path": path,
                "client_ip": client_ip,
                "status_code": response.status_code,
                "duration_ms": int(duration_ms),
            },
        )

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
