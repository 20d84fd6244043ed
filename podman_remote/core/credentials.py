"""Shared bearer credential loaded once at startup.

The token lives in a file (typically a podman secret mounted at
``/run/secrets/api_token``). A missing or unreadable file is not fatal: the
store falls back to an empty token, which rejects every request.
"""

from __future__ import annotations

import hmac
from pathlib import Path
from typing import Protocol, runtime_checkable

from podman_remote.core.config import get_settings
from podman_remote.core.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TokenValidator(Protocol):
    """Capability checked by the bearer authenticator."""

    def validate(self, token: str) -> bool: ...


class CredentialStore:
    """Immutable holder of the single expected token."""

    __slots__ = ("_token", "_source")

    def __init__(self, token: str, source: str | None = None) -> None:
        self._token = token
        self._source = source

    @property
    def source(self) -> str | None:
        """Where the token was loaded from, if it came from a file."""
        return self._source

    @property
    def is_empty(self) -> bool:
        return not self._token

    def validate(self, token: str) -> bool:
        """Check a candidate token against the expected one.

        An empty expected token never validates, whatever the candidate.
        """
        if not self._token:
            return False
        return hmac.compare_digest(token.encode(), self._token.encode())

    @classmethod
    def from_file(cls, path: str | Path) -> CredentialStore:
        """Load the token from ``path``, stripping surrounding whitespace.

        Args:
            path: File containing the token

        Returns:
            CredentialStore, holding an empty token if the file could not be read
        """
        token_path = Path(path)
        try:
            token = token_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                f"Failed to read API token from {token_path}: {e}. Using empty token.",
                extra={"token_file": str(token_path)},
            )
            return cls("", source=str(token_path))

        if not token:
            logger.warning(
                "API token is empty. All authenticated requests will fail.",
                extra={"token_file": str(token_path)},
            )
        else:
            logger.info(
                f"API token loaded successfully from {token_path}",
                extra={"token_file": str(token_path)},
            )
        return cls(token, source=str(token_path))

    @classmethod
    def from_settings(cls) -> CredentialStore:
        """Load the token from the configured ``API_TOKEN_FILE`` path."""
        return cls.from_file(get_settings().api_token_file)

    def __repr__(self) -> str:
        state = "empty" if self.is_empty else "loaded"
        return f"CredentialStore(source={self._source!r}, token=<{state}>)"
