"""Pytest configuration and shared fixtures.

This module provides shared test fixtures for all tests:
- reset_settings: clears the cached settings around every test
- fake_engine / fake_systemd: in-memory backends (see mock_utils.py)
- container_manager / unit_manager: translators wired to the fakes
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from podman_remote.core.config import get_settings
from podman_remote.services.container_manager import ContainerManager
from podman_remote.services.unit_manager import UnitManager
from podman_remote.tests.mock_utils import FakeEngine, FakeSystemd

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None]:
    """Give every test fresh settings that never touch real host paths."""
    monkeypatch.setenv("API_TOKEN_FILE", str(tmp_path / "missing_token"))
    monkeypatch.delenv("LOG_FILE_PATH", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Container engine with one stopped and one running container."""
    engine = FakeEngine()
    engine.add_container("c0ffee", name="db", running=False)
    engine.add_container("beef42", name="web", running=True)
    return engine


@pytest.fixture
def fake_systemd() -> FakeSystemd:
    """systemd manager with two services and one non-service unit."""
    systemd = FakeSystemd()
    systemd.add_unit("nginx.service", active=False)
    systemd.add_unit("sockets.target", active=True)
    systemd.add_unit("podman-auto-update.service", active=True)
    return systemd


@pytest.fixture
def container_manager(fake_engine: FakeEngine) -> ContainerManager:
    return ContainerManager(engine_factory=fake_engine.client)


@pytest.fixture
def unit_manager(fake_systemd: FakeSystemd) -> UnitManager:
    return UnitManager(bus_factory=fake_systemd.client)
