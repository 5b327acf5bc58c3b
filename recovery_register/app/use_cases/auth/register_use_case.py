"""
Register Use Case

classify -> store -> establish a User session -> sanitized identity.
"""

import logging
from typing import Optional

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.client_sanitizer import sanitize_for_log
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.identity_classifier import IdentityClassifier, RegistrationInput
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import AuditEvent, TrustLevel
from recovery_register.libs.result import Result, Return

from .dtos import AuthOutcome, AuthResponse, RegisterCommand, SanitizedUser

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Classify input (validation happens before any storage access)
    2. Reject duplicate username/email
    3. Hash password and persist the identity
    4. Regenerate the session at User trust level
    5. Record an audit event without identifying data
    6. Commit and return the sanitized identity
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings
        self.classifier = IdentityClassifier(settings)

    async def execute(
        self, command: RegisterCommand, current_token: Optional[str] = None
    ) -> Result[AuthOutcome]:
        classified = self.classifier.classify(RegistrationInput(**command.model_dump()))
        if classified.is_err():
            return classified

        async with self.uow:
            store = CredentialStore(self.uow, self.settings)
            created = await store.create(classified.value, command.password)
            if created.is_err():
                return created
            identity = created.value

            sessions = SessionTrustManager(self.uow, self.settings)
            issued = await sessions.establish(identity, TrustLevel.user, current_token)
            if issued.is_err():
                return issued

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=identity.id,
                    action="register",
                    event_metadata=sanitize_for_log(
                        {
                            "identity_type": identity.identity_type.value,
                            "is_anonymous": identity.is_anonymous,
                        }
                    ),
                )
            )

            await self.uow.commit()

            logger.info(
                "Registered identity %s (%s)", identity.id, identity.identity_type.value
            )
            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Registration successful",
                        user=SanitizedUser.from_identity(identity),
                    ),
                    session_token=issued.value.token,
                )
            )
