"""FastAPI Depends() functions for the backend translators.

Routes receive their translator through dependency injection so tests can
swap in fakes with ``app.dependency_overrides``.

Usage:
    from podman_remote.api.dependencies import get_container_manager

    @router.get("/")
    async def list_containers(
        manager: ContainerManager = Depends(get_container_manager),
    ):
        return await manager.list_containers()
"""

from podman_remote.core.config import get_settings
from podman_remote.services.container_manager import ContainerManager, default_engine_factory
from podman_remote.services.unit_manager import UnitManager


def get_container_manager() -> ContainerManager:
    """Container translator opening one engine connection per operation."""
    settings = get_settings()
    return ContainerManager(
        engine_factory=default_engine_factory,
        stop_timeout=settings.container_stop_timeout_seconds,
    )


def get_unit_manager() -> UnitManager:
    """Service translator opening one session-bus connection per operation."""
    return UnitManager()
