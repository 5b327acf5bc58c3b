"""
Change Password Use Case
"""

from typing import Optional

from recovery_register.app.services.auth_errors import INVALID_CREDENTIALS, SESSION_INVALID
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.identity_classifier import IdentityClassifier
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.auth.dtos import AuthOutcome, AuthResponse, SanitizedUser
from recovery_register.domain.entities import AuditEvent, AuthSession
from recovery_register.libs.result import Result, Return


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current password must be re-entered
    - New password follows the policy of the identity's security profile
    - Every session of the identity is revoked, then a fresh one is issued
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(
        self,
        session: AuthSession,
        current_password: Optional[str],
        new_password: Optional[str],
        current_token: Optional[str],
    ) -> Result[AuthOutcome]:
        async with self.uow:
            identity = await self.uow.identities.get_by_id(session.user_id)
            if identity is None:
                return Return.err(SESSION_INVALID)

            checked = IdentityClassifier(self.settings).validate_password(
                new_password, identity.security_profile
            )
            if checked.is_err():
                return checked

            store = CredentialStore(self.uow, self.settings)
            if not store.check_password(identity, current_password):
                return Return.err(INVALID_CREDENTIALS)

            updated = await store.update_password(identity, new_password)
            if updated.is_err():
                return updated
            identity = updated.value

            sessions = SessionTrustManager(self.uow, self.settings)
            revoked = await sessions.revoke_all(identity.id)
            if revoked.is_err():
                return revoked
            issued = await sessions.establish(identity, session.trust_level)
            if issued.is_err():
                return issued

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=identity.id,
                    action="password_changed",
                    event_metadata={"revoked_sessions": revoked.value},
                )
            )
            await self.uow.commit()

            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Password changed", user=SanitizedUser.from_identity(identity)
                    ),
                    session_token=issued.value.token,
                )
            )
