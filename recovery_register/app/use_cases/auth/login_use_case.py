"""
Login Use Case

Authenticates by pseudonym or email and establishes a User session.
"""

import logging
from typing import Optional

from recovery_register.app.services.auth_errors import validation_error
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.client_sanitizer import mask_identifier, sanitize_for_log
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.identity_classifier import IdentityClassifier
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import AuditEvent, TrustLevel
from recovery_register.libs.result import Result, Return

from .dtos import AuthOutcome, AuthResponse, CredentialsCommand, SanitizedUser

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Identifier may be a pseudonym or an email, regardless of how the
      identity registered
    - Unknown identifier and wrong password are indistinguishable
    - Session is regenerated on success (no fixation)
    - Admin identities still receive a User-level session here; admin
      trust is only granted by admin login
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings
        self.classifier = IdentityClassifier(settings)

    async def execute(
        self, command: CredentialsCommand, current_token: Optional[str] = None
    ) -> Result[AuthOutcome]:
        identifier = self.classifier.validate_identifier(command.identifier)
        if identifier.is_err():
            return identifier
        if not command.password:
            return Return.err(validation_error({"password": "Password is required"}))

        async with self.uow:
            store = CredentialStore(self.uow, self.settings)
            verified = await store.verify(identifier.value, command.password)
            if verified.is_err():
                await self.uow.audit_events.create(
                    AuditEvent(
                        action="login_failed",
                        event_metadata=sanitize_for_log({"identifier": identifier.value}),
                    )
                )
                await self.uow.commit()
                return verified
            identity = verified.value

            sessions = SessionTrustManager(self.uow, self.settings)
            issued = await sessions.establish(identity, TrustLevel.user, current_token)
            if issued.is_err():
                return issued

            await self.uow.audit_events.create(
                AuditEvent(user_id=identity.id, action="login", event_metadata={"trust_level": "user"})
            )
            await self.uow.commit()

            logger.info("Login succeeded for %s", mask_identifier(identifier.value))
            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Login successful",
                        user=SanitizedUser.from_identity(identity),
                    ),
                    session_token=issued.value.token,
                )
            )
