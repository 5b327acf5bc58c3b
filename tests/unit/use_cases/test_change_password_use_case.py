from uuid import uuid4

import bcrypt
import pytest

from recovery_register.app.use_cases.account import ChangePasswordUseCase
from recovery_register.domain.base import utcnow
from recovery_register.domain.entities import (
    AuthSession,
    Identity,
    IdentityType,
    Role,
    SecurityProfile,
    TrustLevel,
)


def make_session(profile=SecurityProfile.basic):
    now = utcnow()
    return AuthSession(
        id=uuid4(),
        token_hash="h",
        user_id=4,
        username="alice",
        security_profile=profile,
        is_anonymous=True,
        role=Role.user,
        trust_level=TrustLevel.user,
        created_at=now,
        last_seen_at=now,
        expires_at=now,
    )


def make_identity(profile=SecurityProfile.basic):
    return Identity(
        id=4,
        username="alice",
        password_hash=bcrypt.hashpw(b"secret1", bcrypt.gensalt(4)).decode(),
        identity_type=IdentityType.pseudonym,
        role=Role.user,
        security_profile=profile,
    )


@pytest.mark.asyncio
async def test_change_password_revokes_everything_and_issues_new_session(mock_uow, settings):
    identity = make_identity()
    mock_uow.identities.get_by_id.return_value = identity
    mock_uow.sessions.revoke_all_by_user_id.return_value = 3

    result = await ChangePasswordUseCase(mock_uow, settings).execute(
        make_session(), "secret1", "newsecret", "old-token"
    )

    assert result.is_ok()
    assert bcrypt.checkpw(b"newsecret", identity.password_hash.encode())
    mock_uow.sessions.revoke_all_by_user_id.assert_awaited_once_with(4)
    mock_uow.sessions.create.assert_awaited_once()
    assert result.value.session_token != "old-token"


@pytest.mark.asyncio
async def test_wrong_current_password(mock_uow, settings):
    mock_uow.identities.get_by_id.return_value = make_identity()

    result = await ChangePasswordUseCase(mock_uow, settings).execute(
        make_session(), "wrong-pw", "newsecret", "token"
    )

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.revoke_all_by_user_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_new_password_follows_profile_policy(mock_uow, settings):
    mock_uow.identities.get_by_id.return_value = make_identity(SecurityProfile.advanced)

    result = await ChangePasswordUseCase(mock_uow, settings).execute(
        make_session(SecurityProfile.advanced), "secret1", "short12", "token"
    )

    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.details == {"password": "Password must be at least 8 characters long"}
