"""Request/Response logging middleware.

Logs the completion of every request with method, path, status and latency.
The level follows the status code: INFO for 2xx/3xx, WARNING for 4xx and
ERROR for 5xx. Liveness probes are excluded to keep the log readable.

Usage:
    from podman_remote.api.middleware.request_logging import RequestLoggingMiddleware

    app.add_middleware(RequestLoggingMiddleware)
"""

import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from podman_remote.core.logging import get_logger, get_request_id

# Default paths to exclude from request logging (reduce noise)
DEFAULT_EXCLUDED_PATHS = frozenset({"/", "/health"})

_logger = get_logger(__name__)


def format_request_log(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Format request log data as a structured dictionary."""
    log_data: dict[str, Any] = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    if request_id:
        log_data["request_id"] = request_id
    return log_data


def _get_log_level_for_status(status_code: int, default_level: int = logging.INFO) -> int:
    """Get appropriate log level based on HTTP status code."""
    if status_code >= 500:
        return logging.ERROR
    elif status_code >= 400:
        return logging.WARNING
    return default_level


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for structured HTTP request/response logging."""

    def __init__(
        self,
        app: Any,
        excluded_paths: Iterable[str] | None = None,
        log_level: int = logging.INFO,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: ASGI application
            excluded_paths: Exact paths to exclude from logging.
                           Defaults to the liveness endpoints.
            log_level: Log level for successful requests (2xx/3xx).
        """
        super().__init__(app)
        self.excluded_paths = (
            frozenset(excluded_paths) if excluded_paths is not None else DEFAULT_EXCLUDED_PATHS
        )
        self.default_log_level = log_level

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log completion with timing."""
        path = request.url.path
        method = request.method

        if path in self.excluded_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = get_request_id()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_data = format_request_log(method, path, 500, duration_ms, request_id)
            log_data["error_type"] = type(e).__name__
            _logger.error(
                f"{method} {path} failed with exception after {duration_ms:.2f}ms",
                extra=log_data,
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_data = format_request_log(method, path, response.status_code, duration_ms, request_id)
        _logger.log(
            _get_log_level_for_status(response.status_code, self.default_log_level),
            f"{method} {path} completed with {response.status_code} in {duration_ms:.2f}ms",
            extra=log_data,
        )
        return response
