"""systemd manager client over the D-Bus session bus.

Talks to ``org.freedesktop.systemd1.Manager`` of the user's service manager
using dbus-fast. Each client owns one bus connection for the lifetime of an
``async with`` block.

Usage:
    async with SystemdClient() as systemd:
        units = await systemd.list_units()
        await systemd.start_unit("nginx.service")
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from dbus_fast import Message, MessageType
from dbus_fast.aio import MessageBus
from dbus_fast.errors import AuthError, DBusError, InvalidAddressError

from podman_remote.core.exceptions import BusUnavailableError
from podman_remote.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

SESSION_BUS_ENV = "DBUS_SESSION_BUS_ADDRESS"

SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
SYSTEMD_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"

# Job mode that replaces conflicting queued jobs for the unit
JOB_MODE_REPLACE = "replace"


@dataclass(frozen=True, slots=True)
class UnitStatus:
    """One row of the manager's ListUnits reply."""

    name: str
    description: str
    load_state: str
    active_state: str
    sub_state: str

    @classmethod
    def from_dbus(cls, row: Sequence[Any]) -> UnitStatus:
        # (name, description, load, active, sub, following, path, job_id, job_type, job_path)
        return cls(
            name=row[0],
            description=row[1],
            load_state=row[2],
            active_state=row[3],
            sub_state=row[4],
        )


class SystemdClient:
    """Async client for the systemd manager on the session bus."""

    def __init__(self, bus_address: str | None = None) -> None:
        """Initialize systemd client.

        Args:
            bus_address: Session bus address. If None, read from
                DBUS_SESSION_BUS_ADDRESS at connect time.
        """
        self._bus_address = bus_address
        self._bus: MessageBus | None = None

    async def __aenter__(self) -> SystemdClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        """Connect to the session bus.

        Raises:
            BusUnavailableError: If no bus address is configured or the
                connection cannot be established.
        """
        address = self._bus_address or os.environ.get(SESSION_BUS_ENV)
        if not address:
            logger.error(
                f"{SESSION_BUS_ENV} environment variable is not set. "
                "Please set it (e.g., unix:path=/run/user/1000/bus)"
            )
            raise BusUnavailableError("connect", f"{SESSION_BUS_ENV} is not set")

        try:
            self._bus = await MessageBus(bus_address=address).connect()
        except (AuthError, InvalidAddressError, DBusError, OSError) as e:
            logger.error(
                f"Failed to connect to user D-Bus: {sanitize_error(e)}",
                extra={"bus_address": address},
            )
            raise BusUnavailableError("connect", target=address) from e

    async def _call_manager(
        self, member: str, signature: str = "", body: list[Any] | None = None
    ) -> list[Any]:
        """Call a Manager method and return the reply body.

        Raises:
            DBusError: If the manager replies with an error.
        """
        if self._bus is None:
            raise RuntimeError("SystemdClient is not connected")

        reply = await self._bus.call(
            Message(
                destination=SYSTEMD_BUS_NAME,
                path=SYSTEMD_OBJECT_PATH,
                interface=SYSTEMD_MANAGER_INTERFACE,
                member=member,
                signature=signature,
                body=body or [],
            )
        )
        if reply is None:
            raise DBusError("org.freedesktop.DBus.Error.NoReply", f"No reply to {member}")
        if reply.message_type == MessageType.ERROR:
            text = reply.body[0] if reply.body else reply.error_name
            raise DBusError(reply.error_name, text)
        body_out: list[Any] = reply.body
        return body_out

    async def list_units(self) -> list[UnitStatus]:
        """List the units currently loaded by the manager, in manager order."""
        body = await self._call_manager("ListUnits")
        units = [UnitStatus.from_dbus(row) for row in body[0]]
        logger.debug(f"Listed {len(units)} units", extra={"count": len(units)})
        return units

    async def start_unit(self, name: str, mode: str = JOB_MODE_REPLACE) -> str:
        """Queue a start job for ``name``; returns the job object path."""
        body = await self._call_manager("StartUnit", "ss", [name, mode])
        return str(body[0])

    async def stop_unit(self, name: str, mode: str = JOB_MODE_REPLACE) -> str:
        """Queue a stop job for ``name``; returns the job object path."""
        body = await self._call_manager("StopUnit", "ss", [name, mode])
        return str(body[0])

    async def restart_unit(self, name: str, mode: str = JOB_MODE_REPLACE) -> str:
        """Queue a restart job for ``name``; returns the job object path."""
        body = await self._call_manager("RestartUnit", "ss", [name, mode])
        return str(body[0])

    async def enable_unit_files(
        self, names: Sequence[str], runtime: bool = False, force: bool = True
    ) -> list[Any]:
        """Enable unit files; returns the manager's list of changes."""
        body = await self._call_manager("EnableUnitFiles", "asbb", [list(names), runtime, force])
        changes: list[Any] = body[1]
        return changes

    async def disable_unit_files(self, names: Sequence[str], runtime: bool = False) -> list[Any]:
        """Disable unit files; returns the manager's list of changes."""
        body = await self._call_manager("DisableUnitFiles", "asb", [list(names), runtime])
        changes: list[Any] = body[0]
        return changes

    async def close(self) -> None:
        """Disconnect from the bus. Safe to call multiple times."""
        if self._bus is not None:
            try:
                self._bus.disconnect()
            finally:
                self._bus = None
