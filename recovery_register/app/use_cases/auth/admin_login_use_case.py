"""
Admin Login Use Case

Re-verifies credentials, checks the admin role and regenerates the
session at Admin trust level.
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
from recovery_register.domain.entities import AuditEvent
from recovery_register.libs.result import Result, Return

from .dtos import AuthOutcome, AuthResponse, CredentialsCommand, SanitizedUser

logger = logging.getLogger(__name__)


class AdminLoginUseCase:
    """
    Use case for admin login (User -> Admin transition).

    Business Rules:
    - Always re-verifies credentials, even for a live User session
    - role must be admin or super_admin
    - Unknown identifier, wrong password and missing admin role all
      return the same INVALID_CREDENTIALS error
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
                await self._record_failure(identifier.value)
                return verified
            identity = verified.value

            sessions = SessionTrustManager(self.uow, self.settings)
            issued = await sessions.elevate(identity, current_token)
            if issued.is_err():
                if issued.error.code == "INVALID_CREDENTIALS":
                    logger.warning(
                        "Admin login refused for %s: role %s",
                        mask_identifier(identifier.value),
                        identity.role.value,
                    )
                    # Drop the last_login_at written by verify
                    await self.uow.rollback()
                    await self._record_failure(identifier.value)
                return issued

            await self.uow.audit_events.create(
                AuditEvent(user_id=identity.id, action="admin_login", event_metadata={"trust_level": "admin"})
            )
            await self.uow.commit()

            logger.info("Admin login succeeded for %s", mask_identifier(identifier.value))
            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Admin login successful",
                        user=SanitizedUser.from_identity(identity),
                    ),
                    session_token=issued.value.token,
                )
            )

    async def _record_failure(self, identifier: str) -> None:
        # One event for every failure reason, like the response
        await self.uow.audit_events.create(
            AuditEvent(
                action="admin_login_failed",
                event_metadata=sanitize_for_log({"identifier": identifier}),
            )
        )
        await self.uow.commit()
