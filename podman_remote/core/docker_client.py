"""Docker API wrapper for container management.

This module provides an async wrapper around docker-py for the Docker/Podman
engine API. Blocking docker-py calls run in a thread pool via
asyncio.to_thread() so that a slow engine round-trip only holds up the request
that issued it.

Features:
- Works against both Docker and Podman (they share the same API)
- One client per scope: connect on entry, close on every exit path
- Returns the engine's raw JSON records (list summaries, inspect responses)
- Engine errors propagate as docker-py/requests exceptions for the caller to map

Usage:
    async with DockerClient("unix:///var/run/docker.sock", timeout=5) as client:
        summaries = await client.list_containers()
        detail = await client.inspect_container(summaries[0]["Id"])
"""

from __future__ import annotations

import asyncio
from typing import Any

from docker import DockerClient as BaseDockerClient  # type: ignore[attr-defined]
from docker.errors import DockerException
from requests.exceptions import RequestException

from podman_remote.core.exceptions import ContainerEngineError
from podman_remote.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

# Everything docker-py can raise for a failed engine call. Socket-level
# failures surface as requests exceptions, API replies >= 400 as DockerException.
ENGINE_ERRORS: tuple[type[Exception], ...] = (DockerException, RequestException)


class DockerClient:
    """Async wrapper around docker-py for a single engine connection.

    Attributes:
        _docker_host: The engine URL (e.g., unix:///var/run/docker.sock)
        _timeout: Connect/read timeout in seconds for engine requests
        _client: The underlying docker-py client, set while connected
    """

    def __init__(self, docker_host: str, timeout: int = 5) -> None:
        """Initialize Docker client.

        Args:
            docker_host: Engine URL (e.g., unix:///var/run/docker.sock,
                        unix:///run/user/1000/podman/podman.sock).
            timeout: Connect/read timeout in seconds.
        """
        self._docker_host = docker_host
        self._timeout = timeout
        self._client: BaseDockerClient | None = None

    async def __aenter__(self) -> DockerClient:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Open the engine connection.

        docker-py negotiates the API version on construction, so this is also
        the reachability check.

        Raises:
            ContainerEngineError: If the engine cannot be reached.
        """
        try:
            self._client = await asyncio.to_thread(
                BaseDockerClient,
                base_url=self._docker_host,
                timeout=self._timeout,
                version="auto",
            )
        except ENGINE_ERRORS as e:
            logger.error(
                f"Failed to connect to container engine: {sanitize_error(e)}",
                extra={"docker_host": self._docker_host},
            )
            raise ContainerEngineError("connect", target=self._docker_host) from e

        logger.debug(
            "Connected to container engine",
            extra={"docker_host": self._docker_host},
        )

    def _require_client(self) -> BaseDockerClient:
        if self._client is None:
            raise RuntimeError("DockerClient is not connected")
        return self._client

    async def list_containers(self, all: bool = True) -> list[dict[str, Any]]:
        """List container summaries in engine order.

        Args:
            all: If True, include stopped containers. If False, only running.

        Returns:
            Container summary records as returned by the engine.
        """
        client = self._require_client()
        summaries: list[dict[str, Any]] = await asyncio.to_thread(
            client.api.containers, all=all
        )
        logger.debug(
            f"Listed {len(summaries)} containers",
            extra={"count": len(summaries), "include_all": all},
        )
        return summaries

    async def inspect_container(self, container_id: str) -> dict[str, Any]:
        """Inspect a container.

        Args:
            container_id: Container ID or name (full or short form).

        Returns:
            The engine's inspect response.

        Raises:
            docker.errors.NotFound: If the engine does not know the container.
        """
        client = self._require_client()
        detail: dict[str, Any] = await asyncio.to_thread(
            client.api.inspect_container, container_id
        )
        return detail

    async def start_container(self, container_id: str) -> None:
        """Start a container.

        Starting an already running container is accepted by the engine
        (HTTP 304) and does not raise.

        Args:
            container_id: Container ID to start.
        """
        client = self._require_client()
        await asyncio.to_thread(client.api.start, container_id)
        logger.info(
            f"Started container {container_id}",
            extra={"container_id": container_id},
        )

    async def stop_container(self, container_id: str, timeout: int | None = None) -> None:
        """Stop a container.

        Stopping an already stopped container is accepted by the engine
        (HTTP 304) and does not raise.

        Args:
            container_id: Container ID to stop.
            timeout: Seconds to wait for graceful stop before killing. None
                uses the container's configured stop timeout.
        """
        client = self._require_client()
        await asyncio.to_thread(client.api.stop, container_id, timeout=timeout)
        logger.info(
            f"Stopped container {container_id}",
            extra={"container_id": container_id, "timeout": timeout},
        )

    async def close(self) -> None:
        """Close the engine connection.

        Safe to call multiple times.
        """
        if self._client is not None:
            try:
                await asyncio.to_thread(self._client.close)
                logger.debug("Docker client connection closed")
            except Exception as e:
                # Log but don't raise - we're cleaning up
                logger.debug(f"Error closing Docker client: {e}")
            finally:
                self._client = None
