from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from recovery_register.domain.base import utcnow
from recovery_register.domain.entities import AuthSession
from tests.utils.session_cookie import COOKIE_NAME, session_headers


@pytest.mark.asyncio
async def test_me_returns_session_snapshot(client: AsyncClient, test_data):
    """The current session view

    Given I registered with an email
    When I call /auth/me
    Then I see my snapshot with trust level user
    And neither my email nor any hash is included
    """
    await client.post("/api/auth/register", json=test_data.get_copy("full_registration"))

    response = await client.get("/api/auth/me")

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "carol"
    assert data["trust_level"] == "user"
    assert data["is_anonymous"] is False
    assert data["role"] == "user"
    assert "email" not in data
    assert "token_hash" not in data
    assert "carol@example.com" not in response.text


@pytest.mark.asyncio
async def test_validated_request_rolls_the_cookie(client: AsyncClient, test_data):
    """Activity keeps the browser cookie alive

    Given I registered
    When I call /auth/me with my session cookie
    Then the same token is sent back with a fresh 24h max-age
    """
    register = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    token = register.cookies.get(COOKIE_NAME)
    client.cookies.clear()

    response = await client.get("/api/auth/me", headers=session_headers(token))

    assert response.status_code == 200
    assert response.cookies.get(COOKIE_NAME) == token
    set_cookie = response.headers["set-cookie"]
    assert "Max-Age=86400" in set_cookie
    assert "HttpOnly" in set_cookie


@pytest.mark.asyncio
async def test_rejected_session_gets_no_cookie(client: AsyncClient):
    response = await client.get("/api/auth/me", headers=session_headers("made-up"))

    assert response.status_code == 401
    assert "set-cookie" not in response.headers

@pytest.mark.asyncio
async def test_me_without_session(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["error"] == {"code": "SESSION_INVALID", "message": "Authentication required"}


@pytest.mark.asyncio
async def test_me_with_unknown_session(client: AsyncClient):
    response = await client.get("/api/auth/me", headers=session_headers("made-up"))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "SESSION_INVALID"


@pytest.mark.asyncio
async def test_logout_destroys_session(client: AsyncClient, test_data):
    register = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    token = register.cookies.get(COOKIE_NAME)

    response = await client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert COOKIE_NAME in response.headers["set-cookie"]
    client.cookies.clear()
    assert (await client.get("/api/auth/me", headers=session_headers(token))).status_code == 401


@pytest.mark.asyncio
async def test_logout_is_idempotent(client: AsyncClient, test_data):
    register = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    token = register.cookies.get(COOKIE_NAME)
    client.cookies.clear()

    first = await client.post("/api/auth/logout", headers=session_headers(token))
    second = await client.post("/api/auth/logout", headers=session_headers(token))
    anonymous = await client.post("/api/auth/logout")

    assert first.status_code == second.status_code == anonymous.status_code == 200


@pytest.mark.asyncio
async def test_expired_session_is_rejected_and_revoked(client: AsyncClient, db_session, test_data):
    await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    stored = (await db_session.execute(select(AuthSession))).scalar_one()
    stored.expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(stored)
    await db_session.commit()

    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    await db_session.refresh(stored)
    assert stored.revoked is True


@pytest.mark.asyncio
async def test_session_expiry_rolls_forward_on_use(client: AsyncClient, db_session, test_data):
    await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    stored = (await db_session.execute(select(AuthSession))).scalar_one()
    stored.expires_at = utcnow() + timedelta(seconds=30)
    db_session.add(stored)
    await db_session.commit()

    response = await client.get("/api/auth/me")

    assert response.status_code == 200
    await db_session.refresh(stored)
    assert stored.expires_at > utcnow() + timedelta(hours=1)


@pytest.mark.asyncio
async def test_only_token_digest_is_stored(client: AsyncClient, db_session, test_data):
    register = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    token = register.cookies.get(COOKIE_NAME)

    stored = (await db_session.execute(select(AuthSession))).scalar_one()

    assert stored.token_hash != token
    assert len(stored.token_hash) == 64


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
