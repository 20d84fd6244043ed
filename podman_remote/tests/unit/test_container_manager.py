"""Unit tests for the container translator."""

import pytest

from podman_remote.core.exceptions import ContainerEngineError, ContainerNotFoundError
from podman_remote.services.container_manager import ContainerManager
from podman_remote.tests.mock_utils import FakeEngine


@pytest.mark.asyncio
async def test_list_returns_all_containers_in_engine_order(container_manager, fake_engine):
    summaries = await container_manager.list_containers()

    assert [c["Id"] for c in summaries] == ["c0ffee", "beef42"]
    assert fake_engine.connections_opened == fake_engine.connections_closed == 1


@pytest.mark.asyncio
async def test_list_empty_engine():
    manager = ContainerManager(engine_factory=FakeEngine().client)
    assert await manager.list_containers() == []


@pytest.mark.asyncio
async def test_list_failure_is_engine_error(container_manager, fake_engine):
    fake_engine.fail_list = True

    with pytest.raises(ContainerEngineError) as exc_info:
        await container_manager.list_containers()

    assert exc_info.value.operation == "list"
    assert fake_engine.connections_closed == 1


@pytest.mark.asyncio
async def test_get_known_container(container_manager):
    detail = await container_manager.get_container("beef42")
    assert detail["Id"] == "beef42"
    assert detail["State"]["Running"] is True


@pytest.mark.asyncio
async def test_get_unknown_container_is_not_found(container_manager):
    with pytest.raises(ContainerNotFoundError) as exc_info:
        await container_manager.get_container("nope")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_listed_ids_can_be_fetched(container_manager):
    for summary in await container_manager.list_containers():
        detail = await container_manager.get_container(summary["Id"])
        assert detail["Id"] == summary["Id"]


@pytest.mark.asyncio
async def test_update_start_then_inspect(container_manager, fake_engine):
    detail = await container_manager.update_container("c0ffee", running=True)

    assert detail["State"]["Running"] is True
    assert fake_engine.calls == [("start", "c0ffee"), ("inspect", "c0ffee")]


@pytest.mark.asyncio
async def test_update_stop_then_inspect(container_manager, fake_engine):
    detail = await container_manager.update_container("beef42", running=False)

    assert detail["State"]["Running"] is False
    assert fake_engine.calls == [("stop", "beef42"), ("inspect", "beef42")]


@pytest.mark.asyncio
async def test_repeated_start_is_idempotent(container_manager):
    first = await container_manager.update_container("c0ffee", running=True)
    second = await container_manager.update_container("c0ffee", running=True)

    assert first["State"] == second["State"]


@pytest.mark.asyncio
async def test_update_unknown_container_is_engine_error(container_manager):
    with pytest.raises(ContainerEngineError) as exc_info:
        await container_manager.update_container("nope", running=True)

    assert exc_info.value.status_code == 500
    assert exc_info.value.operation == "start"


@pytest.mark.asyncio
async def test_inspect_failure_after_update(container_manager, fake_engine):
    fake_engine.fail_inspect_after_action = True

    with pytest.raises(ContainerEngineError) as exc_info:
        await container_manager.update_container("c0ffee", running=True)

    assert exc_info.value.operation == "inspect"
    # The start itself was not rolled back
    assert fake_engine.containers["c0ffee"]["State"] == "running"


@pytest.mark.asyncio
@pytest.mark.parametrize("call", ["list", "get", "update"])
async def test_unreachable_engine(container_manager, fake_engine, call):
    fake_engine.reachable = False

    with pytest.raises(ContainerEngineError):
        if call == "list":
            await container_manager.list_containers()
        elif call == "get":
            await container_manager.get_container("c0ffee")
        else:
            await container_manager.update_container("c0ffee", running=True)
