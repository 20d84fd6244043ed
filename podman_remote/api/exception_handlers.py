"""Global exception handlers for the FastAPI application.

Converts the gateway's exception taxonomy into bare status-code responses.
Error bodies are always empty: the message, operation and target of a failure
are written to the log and never returned to the client.

Usage:
    from podman_remote.api.exception_handlers import register_exception_handlers
    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response, status

from podman_remote.core.exceptions import PodmanRemoteError
from podman_remote.core.logging import get_logger, get_request_id

logger = get_logger(__name__)


async def podman_remote_exception_handler(
    request: Request,
    exc: PodmanRemoteError,
) -> Response:
    """Handle PodmanRemoteError and its subclasses.

    Args:
        request: The FastAPI request
        exc: The exception that was raised

    Returns:
        Empty response carrying the exception's status code
    """
    log_context = {
        "error_code": exc.error_code,
        "status_code": exc.status_code,
        "path": str(request.url.path),
        "method": request.method,
    }

    request_id = get_request_id()
    if request_id:
        log_context["request_id"] = request_id

    if exc.details:
        log_context["details"] = exc.details

    if exc.status_code >= 500:
        logger.error(f"Backend error: {exc.message}", extra=log_context)
    elif exc.status_code >= 400:
        logger.info(f"Client error: {exc.message}", extra=log_context)

    return Response(status_code=exc.status_code)


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception that escaped the translators."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"path": str(request.url.path), "method": request.method},
        exc_info=exc,
    )
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    # Note: type ignores needed due to Starlette's overly strict handler typing
    # that doesn't account for exception subclass handlers
    app.add_exception_handler(
        PodmanRemoteError,
        podman_remote_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, generic_exception_handler)
