"""Unit tests for the systemd service translator."""

import pytest

from podman_remote.api.schemas.services import ServiceCommand, ServiceInfo
from podman_remote.core.exceptions import (
    BusUnavailableError,
    ServiceManagerError,
    ServiceNotFoundError,
)
from podman_remote.services.unit_manager import normalize_unit_name


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("nginx", "nginx.service"),
        ("nginx.service", "nginx.service"),
        ("foo.bar", "foo.bar.service"),
        ("", ".service"),
        ("getty@tty1", "getty@tty1.service"),
    ],
)
def test_normalize_unit_name(name, expected):
    assert normalize_unit_name(name) == expected


def test_normalize_is_idempotent():
    for name in ["nginx", "a.b.c", "x.service"]:
        once = normalize_unit_name(name)
        assert normalize_unit_name(once) == once


@pytest.mark.asyncio
async def test_list_only_service_units(unit_manager):
    services = await unit_manager.list_services()

    assert [s.name for s in services] == ["nginx.service", "podman-auto-update.service"]
    assert services[1].active_state == "active"
    assert services[1].sub_state == "running"


@pytest.mark.asyncio
async def test_get_by_short_and_full_name(unit_manager):
    short = await unit_manager.get_service("nginx")
    full = await unit_manager.get_service("nginx.service")

    assert short == full
    assert short.name == "nginx.service"
    assert short.load_state == "loaded"


@pytest.mark.asyncio
async def test_get_unknown_service(unit_manager):
    with pytest.raises(ServiceNotFoundError) as exc_info:
        await unit_manager.get_service("nope")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_non_service_unit_is_not_found(unit_manager):
    with pytest.raises(ServiceNotFoundError):
        await unit_manager.get_service("sockets.target")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("command", "expected_call"),
    [
        (ServiceCommand.START, ("start_unit", "nginx.service", "replace")),
        (ServiceCommand.STOP, ("stop_unit", "nginx.service", "replace")),
        (ServiceCommand.RESTART, ("restart_unit", "nginx.service", "replace")),
        (ServiceCommand.ENABLE, ("enable_unit_files", ["nginx.service"], False, True)),
        (ServiceCommand.DISABLE, ("disable_unit_files", ["nginx.service"], False)),
    ],
)
async def test_command_dispatch(unit_manager, fake_systemd, command, expected_call):
    info = await unit_manager.update_service("nginx", command)

    assert fake_systemd.calls == [expected_call]
    assert info.name == "nginx.service"


@pytest.mark.asyncio
async def test_start_then_get_reports_active(unit_manager):
    updated = await unit_manager.update_service("nginx", ServiceCommand.START)
    fetched = await unit_manager.get_service("nginx")

    assert updated.active_state == fetched.active_state == "active"
    assert fetched.sub_state == "running"


@pytest.mark.asyncio
async def test_enable_does_not_change_run_state(unit_manager, fake_systemd):
    info = await unit_manager.update_service("nginx.service", ServiceCommand.ENABLE)

    assert info.active_state == "inactive"
    assert "nginx.service" in fake_systemd.enabled


@pytest.mark.asyncio
async def test_rejected_command_is_manager_error(unit_manager, fake_systemd):
    fake_systemd.reject_commands = True

    with pytest.raises(ServiceManagerError) as exc_info:
        await unit_manager.update_service("nginx", ServiceCommand.RESTART)

    assert exc_info.value.status_code == 500
    assert exc_info.value.operation == "restart"


@pytest.mark.asyncio
async def test_start_unknown_unit_is_manager_error(unit_manager):
    with pytest.raises(ServiceManagerError):
        await unit_manager.update_service("ghost", ServiceCommand.START)


@pytest.mark.asyncio
async def test_unit_gone_after_command(unit_manager, fake_systemd):
    fake_systemd.forget_after_command = True

    with pytest.raises(ServiceNotFoundError):
        await unit_manager.update_service("nginx", ServiceCommand.STOP)


@pytest.mark.asyncio
@pytest.mark.parametrize("call", ["list", "get", "update"])
async def test_bus_unavailable(unit_manager, fake_systemd, call):
    fake_systemd.bus_available = False

    with pytest.raises(BusUnavailableError) as exc_info:
        if call == "list":
            await unit_manager.list_services()
        elif call == "get":
            await unit_manager.get_service("nginx")
        else:
            await unit_manager.update_service("nginx", ServiceCommand.START)

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_states_are_relayed_in_systemd_lowercase(unit_manager):
    info = await unit_manager.get_service("podman-auto-update")

    assert (info.active_state, info.sub_state, info.load_state) == ("active", "running", "loaded")
    properties = ServiceInfo.model_json_schema()["properties"]
    for field in ("active_state", "sub_state", "load_state"):
        assert "lowercase" in properties[field]["description"]
