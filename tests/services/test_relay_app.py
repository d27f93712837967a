# tests/services/test_relay_app.py
"""
Тесты FastAPI приложения relay.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from livemap.config import settings
from livemap.services.relay.app import create_app
from livemap.services.relay.broadcaster import Broadcaster


WS_PATH = settings.relay.RELAY_WS_PATH


@pytest.fixture
def relay_app(broadcaster: Broadcaster):
    return create_app(with_ui=False, broadcaster=broadcaster)


@pytest.fixture
def client(relay_app):
    with TestClient(relay_app) as test_client:
        yield test_client


def _location(lat, lon) -> dict:
    return {"event": "send-location", "data": {"latitude": lat, "longitude": lon}}


class TestHealthEndpoint:
    """Тесты для /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "livemap_relay"
        assert data["version"] == settings.system.VERSION


class TestStatsEndpoint:
    """Тесты для /stats endpoint."""

    def test_stats_empty(self, client: TestClient) -> None:
        response = client.get("/stats")

        assert response.status_code == 200
        assert response.json() == {
            "active_connections": 0,
            "total_connections_ever": 0,
            "total_messages_sent": 0,
            "oldest_connected_at": None,
        }

    def test_stats_counts_connections(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_json(_location(1, 1))
            ws.receive_json()

            stats = client.get("/stats").json()
            assert stats["active_connections"] == 1
            assert stats["total_messages_sent"] == 1
            assert stats["oldest_connected_at"] is not None


class TestRelaySocket:
    """Сценарии через настоящий WebSocket."""

    def test_three_clients_receive_update(self, client: TestClient) -> None:
        """Отправитель и оба соседа получают {id, 10, 20}."""
        with client.websocket_connect(WS_PATH) as ws_x, \
                client.websocket_connect(WS_PATH) as ws_y, \
                client.websocket_connect(WS_PATH) as ws_z:
            ws_x.send_json(_location(10, 20))

            expected = {
                "event": "receive-location",
                "data": {"id": "conn-1", "latitude": 10, "longitude": 20},
            }
            assert ws_x.receive_json() == expected
            assert ws_y.receive_json() == expected
            assert ws_z.receive_json() == expected

    def test_disconnect_announced_to_remaining(self, client: TestClient, broadcaster: Broadcaster) -> None:
        with client.websocket_connect(WS_PATH) as ws_a:
            with client.websocket_connect(WS_PATH):
                pass

            assert ws_a.receive_json() == {"event": "user-disconnected", "data": "conn-2"}
            assert broadcaster.registry.identities() == ["conn-1"]

    def test_malformed_frame_does_not_close(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_text("definitely not json")
            ws.send_json({"data": "no event"})
            ws.send_json(_location(1.5, -2.5))

            assert ws.receive_json() == {
                "event": "receive-location",
                "data": {"id": "conn-1", "latitude": 1.5, "longitude": -2.5},
            }

    def test_unknown_event_ignored(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_json({"event": "chat-message", "data": "hi"})
            ws.send_json(_location(0, 0))

            assert ws.receive_json()["event"] == "receive-location"

    def test_connection_removed_after_close(self, client: TestClient, broadcaster: Broadcaster) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_json(_location(0, 0))
            ws.receive_json()

        assert len(broadcaster.registry) == 0
        assert client.get("/stats").json()["total_connections_ever"] == 1


def test_default_app_uses_settings() -> None:
    app = create_app(with_ui=False)

    assert app.state.broadcaster.echo_to_sender is settings.relay.ECHO_TO_SENDER
    paths = {route.path for route in app.routes}
    assert {"/health", "/stats", WS_PATH} <= paths
