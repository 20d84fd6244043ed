"""Core infrastructure components."""

from podman_remote.core.config import Settings, get_settings
from podman_remote.core.credentials import CredentialStore, TokenValidator
from podman_remote.core.logging import (
    get_logger,
    get_request_id,
    set_request_id,
    setup_logging,
)

__all__ = [
    "CredentialStore",
    "Settings",
    "TokenValidator",
    "get_logger",
    "get_request_id",
    "get_settings",
    "set_request_id",
    "setup_logging",
]
