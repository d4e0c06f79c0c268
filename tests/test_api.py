"""REST API endpoint tests."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from snake_canvas.server.app import create_app
from snake_canvas.server.session_manager import SessionManager

BASE = "http://test"


@pytest.fixture()
def app():
    application = create_app()
    application.state.session_manager = SessionManager()
    return application


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    await app.state.session_manager.cleanup()


async def _create(client, **body) -> str:
    resp = await client.post("/sessions", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestCreateSession:
    async def test_create_default(self, client):
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "not_started"
        assert data["score"] == 0
        assert data["tick_speed_ms"] is None
        assert data["grid_size"] == 25
        assert "session_id" in data

    async def test_create_with_preset(self, client):
        resp = await client.post("/sessions", json={"speed": "beginner"})
        assert resp.status_code == 201
        assert resp.json()["tick_speed_ms"] == 150

    async def test_create_with_explicit_speed(self, client):
        resp = await client.post("/sessions", json={"tick_speed_ms": 80})
        assert resp.json()["tick_speed_ms"] == 80

    async def test_unknown_preset(self, client):
        resp = await client.post("/sessions", json={"speed": "insane"})
        assert resp.status_code == 422

    async def test_both_speeds_rejected(self, client):
        resp = await client.post(
            "/sessions", json={"speed": "advanced", "tick_speed_ms": 80},
        )
        assert resp.status_code == 422

    async def test_grid_too_small(self, client):
        resp = await client.post("/sessions", json={"grid_size": 5})
        assert resp.status_code == 422

    async def test_rate_limit(self, client):
        for _ in range(10):
            await _create(client)
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 429


class TestListAndGet:
    async def test_list_empty(self, client):
        resp = await client.get("/sessions")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_list_after_create(self, client):
        await _create(client)
        data = (await client.get("/sessions")).json()
        assert len(data) == 1
        assert data[0]["viewers"] == 0

    async def test_get_existing(self, client):
        session_id = await _create(client, seed=1)
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["state"]["snake"] == [[8, 8], [8, 9]]
        assert data["state"]["food"] == [8, 3]

    async def test_get_not_found(self, client):
        resp = await client.get("/sessions/nonexistent")
        assert resp.status_code == 404


class TestIntents:
    async def test_direction_starts_game(self, client):
        session_id = await _create(client)
        resp = await client.post(
            f"/sessions/{session_id}/direction", json={"direction": "left"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "running"
        assert data["state"]["direction"] == [-1, 0]

    async def test_reversal_rejected(self, client):
        session_id = await _create(client)
        resp = await client.post(
            f"/sessions/{session_id}/direction", json={"direction": "down"},
        )
        assert resp.json()["state"]["direction"] == [0, -1]

    async def test_invalid_direction(self, client):
        session_id = await _create(client)
        resp = await client.post(
            f"/sessions/{session_id}/direction", json={"direction": "north"},
        )
        assert resp.status_code == 422

    async def test_direction_unknown_session(self, client):
        resp = await client.post(
            "/sessions/nope/direction", json={"direction": "up"},
        )
        assert resp.status_code == 404

    async def test_start_and_restart(self, client):
        session_id = await _create(client)
        resp = await client.post(f"/sessions/{session_id}/start")
        assert resp.json()["status"] == "running"
        resp = await client.post(f"/sessions/{session_id}/restart")
        assert resp.json()["status"] == "not_started"

    async def test_speed_change_restarts(self, client):
        session_id = await _create(client, speed="beginner")
        await client.post(f"/sessions/{session_id}/start")
        resp = await client.post(
            f"/sessions/{session_id}/speed", json={"speed": "advanced"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["tick_speed_ms"] == 50
        assert data["status"] == "not_started"

    async def test_speed_can_be_cleared(self, client):
        session_id = await _create(client, speed="beginner")
        resp = await client.post(f"/sessions/{session_id}/speed", json={})
        assert resp.json()["tick_speed_ms"] is None


class TestDeleteSession:
    async def test_delete(self, client):
        session_id = await _create(client, tick_speed_ms=1000)
        await client.post(f"/sessions/{session_id}/start")
        resp = await client.delete(f"/sessions/{session_id}")
        assert resp.status_code == 204
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.status_code == 404

    async def test_delete_unknown(self, client):
        resp = await client.delete("/sessions/nonexistent")
        assert resp.status_code == 404
