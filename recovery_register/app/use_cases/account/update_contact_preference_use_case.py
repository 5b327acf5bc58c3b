"""
Update Contact Preference Use Case
"""

from recovery_register.app.services.auth_errors import SESSION_INVALID, validation_error
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.auth.dtos import SanitizedUser
from recovery_register.domain.entities import AuditEvent, AuthSession, ContactPreference
from recovery_register.libs.result import Result, Return


class UpdateContactPreferenceUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, session: AuthSession, preference: str) -> Result[SanitizedUser]:
        try:
            contact = ContactPreference(preference)
        except ValueError:
            return Return.err(
                validation_error(
                    {"preferred_contact": "Must be one of: none, pseudonym, email"}
                )
            )

        async with self.uow:
            identity = await self.uow.identities.get_by_id(session.user_id)
            if identity is None:
                return Return.err(SESSION_INVALID)

            updated = await CredentialStore(self.uow, self.settings).update_contact_preference(
                identity, contact
            )
            if updated.is_err():
                return updated

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=identity.id,
                    action="contact_preference_changed",
                    event_metadata={"preferred_contact": contact.value},
                )
            )
            await self.uow.commit()
            return Return.ok(SanitizedUser.from_identity(updated.value))
