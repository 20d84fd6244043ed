"""API route handlers."""

from .containers import router as containers_router
from .health import router as health_router
from .services import router as services_router

__all__ = ["containers_router", "health_router", "services_router"]
