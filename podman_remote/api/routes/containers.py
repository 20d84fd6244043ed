"""REST API endpoints for containers of the local Docker/Podman engine.

Summaries and inspect responses are relayed exactly as the engine returns them.
"""

from typing import Any

from fastapi import APIRouter, Depends

from podman_remote.api.dependencies import get_container_manager
from podman_remote.api.schemas.containers import UpdateContainerRequest
from podman_remote.services.container_manager import ContainerManager

router = APIRouter(prefix="/containers", tags=["containers"])


@router.get(
    "/",
    responses={
        401: {"description": "Missing or invalid bearer token"},
        500: {"description": "Container engine unavailable or list failed"},
    },
)
async def list_containers(
    manager: ContainerManager = Depends(get_container_manager),
) -> list[dict[str, Any]]:
    """List all containers, including stopped ones, in engine order."""
    return await manager.list_containers()


@router.get(
    "/{container_id}",
    responses={
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Container could not be inspected"},
        500: {"description": "Container engine unavailable"},
    },
)
async def get_container(
    container_id: str,
    manager: ContainerManager = Depends(get_container_manager),
) -> dict[str, Any]:
    """Inspect a single container.

    Args:
        container_id: Container ID or name
        manager: Container translator (injected)

    Returns:
        The engine's inspect response
    """
    return await manager.get_container(container_id)


@router.put(
    "/{container_id}",
    responses={
        401: {"description": "Missing or invalid bearer token"},
        500: {"description": "Start/stop or follow-up inspect failed"},
    },
)
async def update_container(
    container_id: str,
    payload: UpdateContainerRequest,
    manager: ContainerManager = Depends(get_container_manager),
) -> dict[str, Any]:
    """Set a container's desired run state.

    ``running: true`` starts the container and ``running: false`` stops it.
    The response is the container's inspect output after the action.

    Args:
        container_id: Container ID or name
        payload: Desired run state
        manager: Container translator (injected)

    Returns:
        The engine's inspect response after the action
    """
    return await manager.update_container(container_id, payload.running)
