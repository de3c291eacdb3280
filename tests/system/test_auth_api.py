"""
System smoke test: the HTTP surface in-process with SQLite.
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from webauth.database import check_db
from webauth.kernel.identity.jwt import get_token_service
from webauth.main import app


@pytest_asyncio.fixture
async def client(db_engine):
    """Async client against the app, tables created by db_engine."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


def _user_payload(**overrides) -> dict:
    payload = {
        "first_name": "Alice",
        "last_name": "Liddell",
        "email": "Alice@Example.com",
        "password": "Secr3t!23",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_check_db_against_live_store(db_engine):
    assert await check_db() is True


@pytest.mark.asyncio
async def test_health_reports_unreachable_database(client: AsyncClient, monkeypatch):
    async def unreachable() -> bool:
        return False

    monkeypatch.setattr("webauth.main.check_db", unreachable)

    r = await client.get("/health")
    assert r.status_code == 503
    assert r.json()["status"] == "degraded"
    assert r.json()["database"] == "unavailable"


@pytest.mark.asyncio
async def test_register_and_login(client: AsyncClient):
    r = await client.post("/auth/user", json=_user_payload())
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["email"] == "alice@example.com"
    assert set(data) == {"id", "email"}

    r = await client.post("/auth/login", json={"email": "alice@example.com", "password": "Secr3t!23"})
    assert r.status_code == 200
    assert r.json()["message"] == "Login successful."

    wrong = await client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong"})
    unknown = await client.post("/auth/login", json={"email": "bob@example.com", "password": "Secr3t!23"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"]
    assert wrong.json()["code"] == unknown.json()["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_register_errors(client: AsyncClient):
    r = await client.post("/auth/user", json=_user_payload(email="not-an-email"))
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_input"

    r = await client.post("/auth/user", json=_user_payload(password=""))
    assert r.status_code == 400

    await client.post("/auth/user", json=_user_payload())
    r = await client.post("/auth/user", json=_user_payload(email="alice@example.com", password="Other1!"))
    assert r.status_code == 409
    assert r.json()["code"] == "conflict"

    r = await client.post("/auth/user", json={"email": "x@example.com"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_user_crud(client: AsyncClient):
    r = await client.post("/auth/user", json=_user_payload(two_fa_key="KEY"))
    user_id = r.json()["id"]

    r = await client.get(f"/auth/user/{user_id}")
    assert r.status_code == 200
    body = r.json()
    assert body["first_name"] == "Alice"
    assert body["two_fa_key"] == "KEY"
    assert "salt" not in body and "hash" not in body

    r = await client.patch(f"/auth/user/{user_id}", json={"last_name": "Pleasance", "password": "N3w-Passw0rd"})
    assert r.status_code == 200
    assert r.json()["last_name"] == "Pleasance"
    assert r.json()["first_name"] == "Alice"

    r = await client.post("/auth/login", json={"email": "alice@example.com", "password": "N3w-Passw0rd"})
    assert r.status_code == 200

    r = await client.get("/auth/users")
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 1
    assert "salt" not in rows[0] and "hash" not in rows[0]

    r = await client.delete(f"/auth/user/{user_id}")
    assert r.status_code == 204

    for method in ("get", "delete"):
        r = await getattr(client, method)(f"/auth/user/{user_id}")
        assert r.status_code == 404
    r = await client.patch(f"/auth/user/{user_id}", json={"first_name": "Ghost"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_jwt_flow(client: AsyncClient):
    r = await client.post("/auth/jwt_user", json={"name": " Neo ", "password": "Matrix#1"})
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["name"] == "neo"
    assert r.headers["location"].endswith(f"/auth/jwt_user/{created['id']}")

    r = await client.get(f"/auth/jwt_user/{created['id']}")
    assert r.json() == {"id": created["id"], "name": "neo"}

    r = await client.post("/auth/jwt_user", json={"name": "NEO", "password": "other"})
    assert r.status_code == 409

    r = await client.post("/auth/get_jwt", json={"name": "neo", "password": "wrong"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"

    r = await client.post("/auth/get_jwt", json={"name": "Neo", "password": "Matrix#1"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert r.json()["token_type"] == "bearer"

    r = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["subject"] == "neo"
    assert r.json()["audience"] == "test-audience"


@pytest.mark.asyncio
async def test_me_rejects_bad_tokens(client: AsyncClient):
    r = await client.get("/auth/me")
    assert r.status_code == 401

    r = await client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["code"] == "invalid_token"

    expired = get_token_service().issue("neo", ttl=timedelta(seconds=-1))
    r = await client.get("/auth/me", headers={"Authorization": f"Bearer {expired.token}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_request_id_propagates(client: AsyncClient):
    r = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["x-request-id"] == "req-123"
