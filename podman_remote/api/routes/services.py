"""REST API endpoints for systemd user services.

Unit names may be given short (``nginx``) or fully qualified
(``nginx.service``).
"""

from fastapi import APIRouter, Depends

from podman_remote.api.dependencies import get_unit_manager
from podman_remote.api.schemas.services import ServiceInfo, UpdateServiceRequest
from podman_remote.services.unit_manager import UnitManager

router = APIRouter(prefix="/services", tags=["services"])


@router.get(
    "/",
    response_model=list[ServiceInfo],
    responses={
        401: {"description": "Missing or invalid bearer token"},
        500: {"description": "Session bus unavailable or unit listing failed"},
    },
)
async def list_services(
    manager: UnitManager = Depends(get_unit_manager),
) -> list[ServiceInfo]:
    """List loaded service units in manager order."""
    return await manager.list_services()


@router.get(
    "/{name}",
    response_model=ServiceInfo,
    responses={
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Service not found"},
        500: {"description": "Session bus unavailable or unit listing failed"},
    },
)
async def get_service(
    name: str,
    manager: UnitManager = Depends(get_unit_manager),
) -> ServiceInfo:
    """Get the live state of a service unit.

    Args:
        name: Short or fully-qualified unit name
        manager: Service translator (injected)

    Returns:
        ServiceInfo for the unit

    Raises:
        ServiceNotFoundError: 404 if the unit is not loaded
    """
    return await manager.get_service(name)


@router.put(
    "/{name}",
    response_model=ServiceInfo,
    responses={
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Service not found after the command"},
        500: {"description": "Command rejected or session bus unavailable"},
    },
)
async def update_service(
    name: str,
    payload: UpdateServiceRequest,
    manager: UnitManager = Depends(get_unit_manager),
) -> ServiceInfo:
    """Start, stop, restart, enable or disable a service unit.

    Args:
        name: Short or fully-qualified unit name
        payload: Command to apply
        manager: Service translator (injected)

    Returns:
        ServiceInfo for the unit after the command
    """
    return await manager.update_service(name, payload.command)
