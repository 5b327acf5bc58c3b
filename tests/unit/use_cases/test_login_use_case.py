import bcrypt
import pytest

from recovery_register.app.use_cases.auth import CredentialsCommand, LoginUseCase
from recovery_register.domain.entities import Identity, IdentityType, Role, TrustLevel


def make_identity(role=Role.user):
    return Identity(
        id=3,
        username="bob",
        email="bob@example.com",
        password_hash=bcrypt.hashpw(b"secret1", bcrypt.gensalt(4)).decode(),
        identity_type=IdentityType.email,
        is_anonymous=False,
        role=role,
    )


@pytest.mark.asyncio
async def test_login_success_establishes_user_session(mock_uow, settings):
    # Arrange
    mock_uow.identities.get_by_identifier.return_value = make_identity()
    use_case = LoginUseCase(mock_uow, settings)

    # Act
    result = await use_case.execute(CredentialsCommand(identifier="bob@example.com", password="secret1"))

    # Assert
    assert result.is_ok()
    assert result.value.response.message == "Login successful"
    session = mock_uow.sessions.create.await_args.args[0]
    assert session.trust_level == TrustLevel.user
    assert mock_uow.audit_events.create.await_args.args[0].action == "login"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_login_looks_up_emails_lowercased(mock_uow, settings):
    mock_uow.identities.get_by_identifier.return_value = make_identity()
    use_case = LoginUseCase(mock_uow, settings)

    await use_case.execute(CredentialsCommand(identifier="Bob@Example.com", password="secret1"))

    mock_uow.identities.get_by_identifier.assert_awaited_once_with("bob@example.com")


@pytest.mark.asyncio
async def test_admin_logging_in_normally_gets_user_trust(mock_uow, settings):
    mock_uow.identities.get_by_identifier.return_value = make_identity(role=Role.admin)
    use_case = LoginUseCase(mock_uow, settings)

    result = await use_case.execute(CredentialsCommand(identifier="bob", password="secret1"))

    assert result.is_ok()
    assert mock_uow.sessions.create.await_args.args[0].trust_level == TrustLevel.user


@pytest.mark.asyncio
async def test_unknown_identifier_and_wrong_password_match(mock_uow, settings):
    use_case = LoginUseCase(mock_uow, settings)

    mock_uow.identities.get_by_identifier.return_value = None
    unknown = await use_case.execute(CredentialsCommand(identifier="nobody@example.com", password="secret1"))

    mock_uow.identities.get_by_identifier.return_value = make_identity()
    wrong = await use_case.execute(CredentialsCommand(identifier="bob@example.com", password="nope-nope"))

    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.create.assert_not_awaited()
    audit = mock_uow.audit_events.create.await_args.args[0]
    assert audit.action == "login_failed"
    assert audit.event_metadata == {"identifier": "bo****@example.com"}


@pytest.mark.asyncio
async def test_malformed_identifier_is_validation_error(mock_uow, settings):
    use_case = LoginUseCase(mock_uow, settings)

    result = await use_case.execute(CredentialsCommand(identifier="has space", password="secret1"))

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.identities.get_by_identifier.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_password_is_validation_error(mock_uow, settings):
    use_case = LoginUseCase(mock_uow, settings)

    result = await use_case.execute(CredentialsCommand(identifier="bob"))

    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.details == {"password": "Password is required"}
