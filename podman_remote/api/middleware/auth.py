"""Bearer token authentication middleware."""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from podman_remote.core.credentials import TokenValidator
from podman_remote.core.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


class RejectReason(StrEnum):
    """Why a request was refused. Logged only; clients always see a bare 401."""

    MISSING_HEADER = "missing_header"
    MALFORMED_SCHEME = "malformed_scheme"
    INVALID_TOKEN = "invalid_token"


@dataclass(frozen=True, slots=True)
class AuthDecision:
    """Outcome of checking one request's Authorization header."""

    reason: RejectReason | None = None

    @property
    def authorized(self) -> bool:
        return self.reason is None


AUTHORIZED = AuthDecision()


def authenticate(authorization: str | None, validator: TokenValidator) -> AuthDecision:
    """Decide whether an Authorization header value carries the expected token.

    Args:
        authorization: Raw Authorization header value, or None if absent
        validator: Credential capability holding the expected token

    Returns:
        AUTHORIZED, or a rejected AuthDecision naming the reason
    """
    if authorization is None:
        return AuthDecision(RejectReason.MISSING_HEADER)

    if not authorization.startswith(BEARER_PREFIX):
        return AuthDecision(RejectReason.MALFORMED_SCHEME)

    token = authorization[len(BEARER_PREFIX) :]
    if not validator.validate(token):
        return AuthDecision(RejectReason.INVALID_TOKEN)

    return AUTHORIZED


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Middleware enforcing bearer authentication on protected path prefixes."""

    def __init__(
        self,
        app: ASGIApp,
        validator: TokenValidator,
        protected_prefixes: Iterable[str] = ("/containers", "/services"),
    ):
        """Initialize authentication middleware.

        Args:
            app: FastAPI application
            validator: Credential capability used to check tokens
            protected_prefixes: Path prefixes that require a bearer token.
                Paths outside them (liveness probes, docs) pass through.
        """
        super().__init__(app)
        self.validator = validator
        self.protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)

    def _is_protected_path(self, path: str) -> bool:
        """Check if path falls under one of the protected prefixes.

        Args:
            path: Request path

        Returns:
            True if the request must be authenticated
        """
        return any(
            path == prefix or path.startswith(f"{prefix}/") for prefix in self.protected_prefixes
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Reject unauthenticated requests to protected paths with an empty 401.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or endpoint

        Returns:
            HTTP response
        """
        if not self._is_protected_path(request.url.path):
            return await call_next(request)

        decision = authenticate(request.headers.get("Authorization"), self.validator)
        if not decision.authorized:
            log_context = {
                "reason": str(decision.reason),
                "path": request.url.path,
                "method": request.method,
            }
            if decision.reason == RejectReason.MALFORMED_SCHEME:
                logger.warning("Authorization header missing Bearer prefix", extra=log_context)
            elif decision.reason == RejectReason.INVALID_TOKEN:
                logger.warning("Invalid authentication token attempt", extra=log_context)
            else:
                logger.warning("Authorization header missing", extra=log_context)
            return Response(status_code=401)

        logger.debug("Authentication successful", extra={"path": request.url.path})
        return await call_next(request)
