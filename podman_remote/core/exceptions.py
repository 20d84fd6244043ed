"""Exception hierarchy for the Podman Remote gateway.

Every error raised at a translator boundary belongs to exactly one member of
the gateway's HTTP taxonomy (401 is answered by the bearer middleware before
any translator runs):

- 404 Not Found (NotFoundError and subclasses)
- 500 Upstream/Internal (BackendError and subclasses)

The exception handlers in ``podman_remote.api.exception_handlers`` turn these
into empty-body responses; messages and details are for logs only.
"""

from __future__ import annotations

from typing import Any


class PodmanRemoteError(Exception):
    """Base exception for all application-specific errors."""

    default_message: str = "An unexpected error occurred"
    default_error_code: str = "INTERNAL_ERROR"
    default_status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.status_code = status_code or self.default_status_code
        self.details = details or {}
        super().__init__(self.message)


# Resource Errors (404)
class NotFoundError(PodmanRemoteError):
    default_message = "Resource not found"
    default_error_code = "NOT_FOUND"
    default_status_code = 404


class ContainerNotFoundError(NotFoundError):
    default_error_code = "CONTAINER_NOT_FOUND"

    def __init__(self, container_id: str, **kwargs: Any) -> None:
        super().__init__(
            f"Container '{container_id}' not found",
            details={"container_id": container_id},
            **kwargs,
        )
        self.container_id = container_id


class ServiceNotFoundError(NotFoundError):
    default_error_code = "SERVICE_NOT_FOUND"

    def __init__(self, unit_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Service '{unit_name}' not found",
            details={"unit_name": unit_name},
            **kwargs,
        )
        self.unit_name = unit_name


# Backend Errors (500)
class BackendError(PodmanRemoteError):
    """A backend call failed; surfaced to clients as a plain 500."""

    default_message = "Backend operation failed"
    default_error_code = "BACKEND_ERROR"
    default_status_code = 500
    backend_name: str = "backend"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        *,
        target: str | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"backend": self.backend_name, "operation": operation}
        if target is not None:
            details["target"] = target
        super().__init__(message, details=details, **kwargs)
        self.operation = operation
        self.target = target


class ContainerEngineError(BackendError):
    default_message = "Container engine operation failed"
    default_error_code = "CONTAINER_ENGINE_ERROR"
    backend_name = "container_engine"


class ServiceManagerError(BackendError):
    default_message = "Service manager operation failed"
    default_error_code = "SERVICE_MANAGER_ERROR"
    backend_name = "service_manager"


class BusUnavailableError(ServiceManagerError):
    """The session bus cannot be reached (address missing or connect failed)."""

    default_message = "Session bus unavailable"
    default_error_code = "BUS_UNAVAILABLE"
