import pytest
from httpx import AsyncClient

from tests.utils.session_cookie import COOKIE_NAME
from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_register_pseudonym_only(client: AsyncClient, test_data):
    """Registering with only a pseudonym

    Given no identity named alice exists
    When I register with pseudonym alice and a password
    Then the identity is anonymous and of type pseudonym
    And a session cookie is set
    And the response carries no contact details
    """
    response = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Registration successful"
    assert exclude_keys(data["user"], {"id", "created_at"}) == {
        "username": "alice",
        "identity_type": "pseudonym",
        "is_anonymous": True,
        "role": "user",
        "security_profile": "basic",
        "preferred_contact": "pseudonym",
    }
    assert response.cookies.get(COOKIE_NAME)


@pytest.mark.asyncio
async def test_register_with_email_is_not_anonymous(client: AsyncClient, test_data):
    response = await client.post("/api/auth/register", json=test_data.get_copy("email_registration"))

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["identity_type"] == "email"
    assert user["is_anonymous"] is False
    assert user["username"] == "bob"
    assert "email" not in user
    assert "bob@example.com" not in response.text


@pytest.mark.asyncio
async def test_register_pseudonym_and_email(client: AsyncClient, test_data):
    response = await client.post("/api/auth/register", json=test_data.get_copy("full_registration"))

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["username"] == "carol"
    assert user["identity_type"] == "email"
    assert user["is_anonymous"] is False
    assert user["preferred_contact"] == "email"


@pytest.mark.asyncio
async def test_register_sets_httponly_cookie(client: AsyncClient, test_data):
    response = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    # Only the opaque token travels to the browser
    assert "alice" not in set_cookie


@pytest.mark.asyncio
async def test_register_requires_an_identifier(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"password": "secret1"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "identifier" in error["details"]
    assert COOKIE_NAME not in response.headers.get("set-cookie", "")


@pytest.mark.asyncio
async def test_register_rejects_short_password(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"pseudonym": "alice", "password": "abc"})

    assert response.status_code == 400
    assert response.json()["error"]["details"]["password"] == "Password must be at least 6 characters long"


@pytest.mark.asyncio
async def test_register_invalid_email_is_not_echoed(client: AsyncClient):
    response = await client.post(
        "/api/auth/register", json={"email": "<script>alert(1)</script>", "password": "secret1"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"]["email"] == "Invalid email address"
    assert "<script>" not in response.text


@pytest.mark.asyncio
async def test_register_wrong_field_type_uses_error_envelope(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"pseudonym": ["alice"], "password": "secret1"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "pseudonym" in error["details"]


@pytest.mark.asyncio
async def test_register_duplicate_pseudonym(client: AsyncClient, test_data):
    first = await client.post("/api/auth/register", json=test_data.get_copy("pseudonym_registration"))
    assert first.status_code == 201

    response = await client.post("/api/auth/register", json={"pseudonym": "alice", "password": "other-secret"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "DUPLICATE_IDENTIFIER"
    assert error["details"] == {"username": "Username is already taken"}


@pytest.mark.asyncio
async def test_register_duplicate_email_ignores_case(client: AsyncClient, test_data):
    first = await client.post("/api/auth/register", json=test_data.get_copy("email_registration"))
    assert first.status_code == 201

    response = await client.post(
        "/api/auth/register",
        json={"pseudonym": "robert", "email": "BOB@example.com", "password": "secret1"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"email": "Email is already taken"}


@pytest.mark.asyncio
async def test_register_derived_username_collision(client: AsyncClient):
    """The username derived from an email local part must also be free"""
    await client.post("/api/auth/register", json={"pseudonym": "bob", "password": "secret1"})

    response = await client.post("/api/auth/register", json={"email": "bob@example.org", "password": "secret1"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "DUPLICATE_IDENTIFIER"
