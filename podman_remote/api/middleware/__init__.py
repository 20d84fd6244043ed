"""API middleware components."""

from .auth import AuthDecision, BearerAuthMiddleware, RejectReason, authenticate
from .request_id import RequestIDMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "AuthDecision",
    "BearerAuthMiddleware",
    "RejectReason",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "authenticate",
]
