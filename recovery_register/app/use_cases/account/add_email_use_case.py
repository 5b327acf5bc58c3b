"""
Add Email Use Case

Explicit identity upgrade: attaching an email is the only way an
identity stops being anonymous.
"""

from typing import Optional

from recovery_register.app.services.auth_errors import SESSION_INVALID, validation_error
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.identity_classifier import IdentityClassifier
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.auth.dtos import AuthOutcome, AuthResponse, SanitizedUser
from recovery_register.domain.entities import AuditEvent, AuthSession
from recovery_register.libs.result import Result, Return


class AddEmailUseCase:
    """
    Business Rules:
    - Email must be valid and not used by another identity
    - is_anonymous becomes False; identity_type is left as registered
    - The session is regenerated so its snapshot carries the new anonymity
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(
        self, session: AuthSession, email: Optional[str], current_token: Optional[str]
    ) -> Result[AuthOutcome]:
        normalized = IdentityClassifier.normalize_email(email) if email else None
        if normalized is None:
            return Return.err(validation_error({"email": "Invalid email address"}))

        async with self.uow:
            identity = await self.uow.identities.get_by_id(session.user_id)
            if identity is None:
                return Return.err(SESSION_INVALID)
            was_anonymous = identity.is_anonymous

            updated = await CredentialStore(self.uow, self.settings).update_email(identity, normalized)
            if updated.is_err():
                return updated
            identity = updated.value

            issued = await SessionTrustManager(self.uow, self.settings).establish(
                identity, session.trust_level, current_token
            )
            if issued.is_err():
                return issued

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=identity.id,
                    action="email_added",
                    event_metadata={"was_anonymous": was_anonymous},
                )
            )
            await self.uow.commit()

            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Email added", user=SanitizedUser.from_identity(identity)
                    ),
                    session_token=issued.value.token,
                )
            )
