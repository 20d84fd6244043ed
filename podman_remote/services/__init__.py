"""Backend translators for the gateway's REST resources."""

from podman_remote.services.container_manager import ContainerManager
from podman_remote.services.unit_manager import UnitManager, normalize_unit_name

__all__ = [
    "ContainerManager",
    "UnitManager",
    "normalize_unit_name",
]
