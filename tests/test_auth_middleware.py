"""Every protected endpoint rejects missing, malformed and expired tokens."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from app.api.deps import get_note_store
from app.core.security import TokenClaims, create_jwt
from app.main import app
from app.models.user import UserRole

NOTE_ID = str(uuid.uuid4())

PROTECTED = [
    ("GET", "/api/auth/me"),
    ("GET", "/api/notes"),
    ("POST", "/api/notes"),
    ("GET", f"/api/notes/{NOTE_ID}"),
    ("PUT", f"/api/notes/{NOTE_ID}"),
    ("DELETE", f"/api/notes/{NOTE_ID}"),
    ("POST", "/api/tenants/acme/upgrade"),
]

BODY = {"title": "T", "content": "C"}


async def _call(client: AsyncClient, method: str, path: str, headers: dict | None = None):
    kwargs = {"headers": headers or {}}
    if method in ("POST", "PUT"):
        kwargs["json"] = BODY
    return await client.request(method, path, **kwargs)


def _token(**overrides) -> str:
    claims = TokenClaims(
        user_id=uuid.uuid4(),
        email="admin@acme.test",
        role=UserRole.ADMIN,
        tenant_id=uuid.uuid4(),
        tenant_slug="acme",
    )
    return create_jwt(claims, **overrides)


@pytest.fixture
def store_spy():
    """Replaces the note store with one that records any access."""
    calls: list[str] = []

    def _spy():
        calls.append("note_store")
        raise AssertionError("business logic reached without authentication")

    app.dependency_overrides[get_note_store] = _spy
    yield calls
    app.dependency_overrides.pop(get_note_store, None)


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), PROTECTED)
async def test_missing_header(client: AsyncClient, store_spy, method, path):
    resp = await _call(client, method, path)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authorization token required"}
    assert store_spy == []


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), PROTECTED)
async def test_garbage_token(client: AsyncClient, store_spy, method, path):
    resp = await _call(client, method, path, {"Authorization": "Bearer totally-fake-token"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}
    assert store_spy == []


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), PROTECTED)
async def test_expired_token(client: AsyncClient, store_spy, method, path):
    token = _token(expires_delta=timedelta(seconds=-1))
    resp = await _call(client, method, path, {"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert store_spy == []


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), [
    ("POST", "/api/notes"),
    ("PUT", f"/api/notes/{NOTE_ID}"),
])
async def test_missing_header_wins_over_malformed_body(
    client: AsyncClient, store_spy, method, path
):
    """Authentication is checked before the body is parsed."""
    resp = await client.request(
        method, path, content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authorization token required"}
    assert store_spy == []


@pytest.mark.asyncio
async def test_non_bearer_scheme(client: AsyncClient, store_spy):
    token = _token()
    resp = await client.get("/api/notes", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authorization token required"}


@pytest.mark.asyncio
async def test_forged_signature(client: AsyncClient, store_spy):
    payload = jwt.get_unverified_claims(_token())
    forged = jwt.encode(payload, "attacker-chosen-secret-value", algorithm="HS256")
    resp = await client.get("/api/notes", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401
    assert store_spy == []


@pytest.mark.asyncio
async def test_role_gate_rejects_member(client: AsyncClient, seeded):
    """Members pass authentication but fail the ADMIN role check."""
    resp = await client.post("/api/auth/login", json={
        "email": "user@acme.test",
        "password": "password",
    })
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}

    resp = await client.post("/api/tenants/acme/upgrade", headers=headers)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Insufficient permissions"}
