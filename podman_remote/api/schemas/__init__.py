"""Pydantic schemas for API request and response validation."""

from podman_remote.api.schemas.containers import UpdateContainerRequest
from podman_remote.api.schemas.services import ServiceCommand, ServiceInfo, UpdateServiceRequest

__all__ = [
    "ServiceCommand",
    "ServiceInfo",
    "UpdateContainerRequest",
    "UpdateServiceRequest",
]
