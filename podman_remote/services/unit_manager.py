"""Translation of /services operations onto the systemd user manager.

Unit names are normalized to their ``.service`` form before every lookup.
Each operation opens its own session-bus connection; an update applies the
command and then rereads the unit over that same connection.

Error mapping:

    bus address missing / connect failure -> BusUnavailableError (500)
    any manager call failure              -> ServiceManagerError (500)
    unit absent from ListUnits            -> ServiceNotFoundError (404)
"""

from collections.abc import Callable
from typing import assert_never

from dbus_fast.errors import DBusError

from podman_remote.api.schemas.services import ServiceCommand, ServiceInfo
from podman_remote.core.exceptions import ServiceManagerError, ServiceNotFoundError
from podman_remote.core.logging import get_logger, sanitize_error
from podman_remote.core.systemd_client import SystemdClient, UnitStatus

logger = get_logger(__name__)

SERVICE_SUFFIX = ".service"

# Errors a manager call can raise once the bus is connected
BUS_ERRORS: tuple[type[Exception], ...] = (DBusError, OSError, EOFError)

BusFactory = Callable[[], SystemdClient]


def normalize_unit_name(name: str) -> str:
    """Return the fully-qualified service unit name.

    >>> normalize_unit_name("nginx")
    'nginx.service'
    >>> normalize_unit_name("nginx.service")
    'nginx.service'
    """
    if name.endswith(SERVICE_SUFFIX):
        return name
    return f"{name}{SERVICE_SUFFIX}"


def _to_service_info(unit: UnitStatus) -> ServiceInfo:
    return ServiceInfo(
        name=unit.name,
        active_state=unit.active_state,
        sub_state=unit.sub_state,
        load_state=unit.load_state,
    )


class UnitManager:
    """Maps service REST operations to systemd manager calls."""

    def __init__(self, bus_factory: BusFactory = SystemdClient) -> None:
        self._bus_factory = bus_factory

    async def list_services(self) -> list[ServiceInfo]:
        """List loaded service units in manager order."""
        async with self._bus_factory() as systemd:
            units = await self._list_units(systemd)
        return [_to_service_info(unit) for unit in units if unit.name.endswith(SERVICE_SUFFIX)]

    async def get_service(self, name: str) -> ServiceInfo:
        """Look up one service unit by short or full name.

        Raises:
            ServiceNotFoundError: If the manager has no such unit loaded.
        """
        unit_name = normalize_unit_name(name)
        async with self._bus_factory() as systemd:
            return await self._read_service(systemd, unit_name)

    async def update_service(self, name: str, command: ServiceCommand) -> ServiceInfo:
        """Apply ``command`` to a service unit and return its state afterwards.

        Raises:
            ServiceManagerError: If the command is rejected by the manager.
            ServiceNotFoundError: If the unit is not loaded after the command.
        """
        unit_name = normalize_unit_name(name)
        async with self._bus_factory() as systemd:
            try:
                await self._apply_command(systemd, unit_name, command)
            except BUS_ERRORS as e:
                logger.error(
                    f"Failed to {command.value} service {unit_name}: {sanitize_error(e)}",
                    extra={"unit_name": unit_name, "command": command.value},
                )
                raise ServiceManagerError(command.value, target=unit_name) from e

            logger.info(
                f"Applied {command.value} to service {unit_name}",
                extra={"unit_name": unit_name, "command": command.value},
            )
            return await self._read_service(systemd, unit_name)

    @staticmethod
    async def _apply_command(
        systemd: SystemdClient, unit_name: str, command: ServiceCommand
    ) -> None:
        match command:
            case ServiceCommand.START:
                await systemd.start_unit(unit_name)
            case ServiceCommand.STOP:
                await systemd.stop_unit(unit_name)
            case ServiceCommand.RESTART:
                await systemd.restart_unit(unit_name)
            case ServiceCommand.ENABLE:
                await systemd.enable_unit_files([unit_name], runtime=False, force=True)
            case ServiceCommand.DISABLE:
                await systemd.disable_unit_files([unit_name], runtime=False)
            case _:
                assert_never(command)

    @staticmethod
    async def _list_units(systemd: SystemdClient) -> list[UnitStatus]:
        try:
            return await systemd.list_units()
        except BUS_ERRORS as e:
            logger.error(f"Failed to list units: {sanitize_error(e)}")
            raise ServiceManagerError("list_units") from e

    async def _read_service(self, systemd: SystemdClient, unit_name: str) -> ServiceInfo:
        units = await self._list_units(systemd)
        for unit in units:
            if unit.name == unit_name:
                return _to_service_info(unit)

        logger.warning(f"Service {unit_name} not found", extra={"unit_name": unit_name})
        raise ServiceNotFoundError(unit_name)
