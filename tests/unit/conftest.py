import pytest
from unittest.mock import AsyncMock, MagicMock

from recovery_register.app.services.auth_settings import AuthSettings


@pytest.fixture
def settings():
    return AuthSettings(
        environment="test",
        session_secret="unit-test-secret",
        bcrypt_rounds=10,
    )


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identities = MagicMock()
    uow.identities.get_by_id = AsyncMock(return_value=None)
    uow.identities.get_by_username = AsyncMock(return_value=None)
    uow.identities.get_by_email = AsyncMock(return_value=None)
    uow.identities.get_by_identifier = AsyncMock(return_value=None)
    uow.identities.create = AsyncMock(side_effect=_assign_id)
    uow.identities.update = AsyncMock(side_effect=lambda identity: identity)
    uow.identities.list = AsyncMock(return_value=[])

    uow.sessions = MagicMock()
    uow.sessions.get_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.touch = AsyncMock(return_value=True)
    uow.sessions.revoke_by_id = AsyncMock(return_value=True)
    uow.sessions.revoke_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.delete_expired = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow


def _assign_id(identity):
    if identity.id is None:
        identity.id = 1
    return identity
