"""Translation of /containers operations onto the container engine.

Each operation opens its own engine connection and closes it before
returning. Engine failures are mapped onto the gateway's error taxonomy:

    list  failure              -> ContainerEngineError (500)
    inspect failure on Get     -> ContainerNotFoundError (404)
    start/stop failure         -> ContainerEngineError (500)
    re-inspect after an update -> ContainerEngineError (500)

Connection failures always surface as ContainerEngineError (500).
"""

from collections.abc import Callable
from typing import Any

from podman_remote.core.config import get_settings
from podman_remote.core.docker_client import ENGINE_ERRORS, DockerClient
from podman_remote.core.exceptions import ContainerEngineError, ContainerNotFoundError
from podman_remote.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

EngineFactory = Callable[[], DockerClient]


def default_engine_factory() -> DockerClient:
    """Build an engine client from settings."""
    settings = get_settings()
    return DockerClient(settings.docker_host, timeout=settings.docker_timeout_seconds)


class ContainerManager:
    """Maps container REST operations to engine calls."""

    def __init__(
        self,
        engine_factory: EngineFactory = default_engine_factory,
        stop_timeout: int | None = None,
    ) -> None:
        self._engine_factory = engine_factory
        self._stop_timeout = stop_timeout

    async def list_containers(self) -> list[dict[str, Any]]:
        """List all containers, stopped ones included, in engine order."""
        async with self._engine_factory() as engine:
            try:
                return await engine.list_containers(all=True)
            except ENGINE_ERRORS as e:
                logger.error(f"Failed to list containers: {sanitize_error(e)}")
                raise ContainerEngineError("list") from e

    async def get_container(self, container_id: str) -> dict[str, Any]:
        """Inspect a single container.

        Raises:
            ContainerNotFoundError: If the engine cannot inspect the container.
        """
        async with self._engine_factory() as engine:
            try:
                return await engine.inspect_container(container_id)
            except ENGINE_ERRORS as e:
                logger.warning(
                    f"Failed to inspect container {container_id}: {sanitize_error(e)}",
                    extra={"container_id": container_id},
                )
                raise ContainerNotFoundError(container_id) from e

    async def update_container(self, container_id: str, running: bool) -> dict[str, Any]:
        """Drive a container to the requested run state and return its new detail.

        The engine treats a redundant start/stop as a no-op, so repeating the
        same request is harmless.

        Args:
            container_id: Container ID or name
            running: True to ensure started, False to ensure stopped

        Raises:
            ContainerEngineError: If the action or the follow-up inspect fails.
                A failed inspect does not mean the action was rolled back.
        """
        operation = "start" if running else "stop"
        async with self._engine_factory() as engine:
            try:
                if running:
                    await engine.start_container(container_id)
                else:
                    await engine.stop_container(container_id, timeout=self._stop_timeout)
            except ENGINE_ERRORS as e:
                logger.error(
                    f"Failed to {operation} container {container_id}: {sanitize_error(e)}",
                    extra={"container_id": container_id, "operation": operation},
                )
                raise ContainerEngineError(operation, target=container_id) from e

            try:
                return await engine.inspect_container(container_id)
            except ENGINE_ERRORS as e:
                logger.error(
                    f"Failed to inspect updated container {container_id}: {sanitize_error(e)}",
                    extra={"container_id": container_id, "operation": operation},
                )
                raise ContainerEngineError("inspect", target=container_id) from e
