"""End-to-end tests of the gateway over HTTP with in-memory backends."""

import pytest
from fastapi.testclient import TestClient

from podman_remote.api.dependencies import get_container_manager, get_unit_manager
from podman_remote.core.credentials import CredentialStore
from podman_remote.main import create_app
from podman_remote.services.container_manager import ContainerManager
from podman_remote.services.unit_manager import UnitManager
from podman_remote.tests.mock_utils import FakeEngine

pytestmark = pytest.mark.integration

TOKEN = "abc123"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def app(fake_engine, fake_systemd):
    app = create_app(CredentialStore(TOKEN))
    app.dependency_overrides[get_container_manager] = lambda: ContainerManager(
        engine_factory=fake_engine.client
    )
    app.dependency_overrides[get_unit_manager] = lambda: UnitManager(
        bus_factory=fake_systemd.client
    )
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


# Liveness


@pytest.mark.parametrize("headers", [{}, AUTH, {"Authorization": "Bearer wrong"}])
def test_liveness_endpoints_are_open(client, headers):
    root = client.get("/", headers=headers)
    health = client.get("/health", headers=headers)

    assert root.status_code == 200
    assert root.text == "Hello, Podman Remote!"
    assert health.status_code == 200
    assert health.text == "OK"


# Authentication


@pytest.mark.parametrize(
    "path", ["/containers/", "/containers/c0ffee", "/services/", "/services/nginx"]
)
@pytest.mark.parametrize(
    "headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": TOKEN}]
)
def test_protected_routes_reject_bad_credentials(client, path, headers):
    response = client.get(path, headers=headers)

    assert response.status_code == 401
    assert response.content == b""


def test_auth_runs_before_body_validation(client):
    response = client.put("/services/nginx", content=b"not json")
    assert response.status_code == 401


def test_empty_configured_token_rejects_everything(fake_engine):
    app = create_app(CredentialStore(""))
    app.dependency_overrides[get_container_manager] = lambda: ContainerManager(
        engine_factory=fake_engine.client
    )
    client = TestClient(app)

    assert client.get("/containers/", headers={"Authorization": "Bearer "}).status_code == 401
    assert client.get("/health").status_code == 200


# Containers


def test_list_containers_empty_engine(app):
    empty = FakeEngine()
    app.dependency_overrides[get_container_manager] = lambda: ContainerManager(
        engine_factory=empty.client
    )
    response = TestClient(app).get("/containers/", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == []


def test_list_containers_relays_summaries(client):
    response = client.get("/containers/", headers=AUTH)

    assert response.status_code == 200
    assert [c["Id"] for c in response.json()] == ["c0ffee", "beef42"]
    assert response.json()[0]["Names"] == ["/db"]


def test_get_unknown_container_is_404(client):
    response = client.get("/containers/nope", headers=AUTH)

    assert response.status_code == 404
    assert response.content == b""


def test_start_container(client, fake_engine):
    response = client.put("/containers/c0ffee", json={"running": True}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["State"]["Running"] is True
    assert fake_engine.containers["c0ffee"]["State"] == "running"


def test_update_unknown_container_is_500(client):
    response = client.put("/containers/nope", json={"running": False}, headers=AUTH)

    assert response.status_code == 500
    assert response.content == b""


def test_update_container_requires_running_field(client):
    response = client.put("/containers/c0ffee", json={}, headers=AUTH)
    assert response.status_code == 422


def test_engine_unreachable_is_500(client, fake_engine):
    fake_engine.reachable = False

    response = client.get("/containers/", headers=AUTH)

    assert response.status_code == 500
    assert response.content == b""


# Services


def test_list_services(client):
    response = client.get("/services/", headers=AUTH)

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == [
        "nginx.service",
        "podman-auto-update.service",
    ]


def test_get_service_short_name(client):
    response = client.get("/services/nginx", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "name": "nginx.service",
        "active_state": "inactive",
        "sub_state": "dead",
        "load_state": "loaded",
    }


def test_get_unknown_service_is_404(client):
    response = client.get("/services/nope", headers=AUTH)

    assert response.status_code == 404
    assert response.content == b""


def test_enable_service(client, fake_systemd):
    response = client.put("/services/nginx", json={"command": "enable"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["name"] == "nginx.service"
    assert fake_systemd.calls == [("enable_unit_files", ["nginx.service"], False, True)]


def test_start_then_get_service(client):
    client.put("/services/nginx.service", json={"command": "start"}, headers=AUTH)
    response = client.get("/services/nginx", headers=AUTH)

    assert response.json()["active_state"] == "active"


def test_unknown_command_is_422(client, fake_systemd):
    response = client.put("/services/nginx", json={"command": "reload"}, headers=AUTH)

    assert response.status_code == 422
    assert fake_systemd.calls == []


def test_bus_unavailable_is_500(client, fake_systemd):
    fake_systemd.bus_available = False

    response = client.get("/services/", headers=AUTH)

    assert response.status_code == 500
    assert response.content == b""


def test_rejected_command_is_500(client, fake_systemd):
    fake_systemd.reject_commands = True

    response = client.put("/services/nginx", json={"command": "stop"}, headers=AUTH)

    assert response.status_code == 500


# Request IDs


def test_request_id_echoed(client):
    response = client.get("/containers/", headers={**AUTH, "X-Request-ID": "req-1"})
    assert response.headers["X-Request-ID"] == "req-1"


def test_request_id_on_rejected_request(client):
    response = client.get("/containers/")
    assert response.status_code == 401
    assert "X-Request-ID" in response.headers
