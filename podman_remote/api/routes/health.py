"""Unauthenticated liveness endpoints."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Greeting, doubles as a liveness check."""
    return "Hello, Podman Remote!"


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    """Simple liveness health check endpoint.

    Always returns 200 "OK" while the process is able to serve requests. It
    does not contact either backend.
    """
    return "OK"
