"""
Revoke Sessions Use Case

Explicit admin revocation of every session held by an identity.
"""

from typing import Any, Dict

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import AuditEvent, AuthSession
from recovery_register.libs.result import Error, Result, Return


class RevokeSessionsUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, actor: AuthSession, target_id: int) -> Result[Dict[str, Any]]:
        async with self.uow:
            target = await self.uow.identities.get_by_id(target_id)
            if target is None:
                return Return.err(Error("IDENTITY_NOT_FOUND", "Identity not found"))

            revoked = await SessionTrustManager(self.uow, self.settings).revoke_all(target_id)
            if revoked.is_err():
                return revoked

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=actor.user_id,
                    action="sessions_revoked",
                    event_metadata={
                        "target_user_id": target_id,
                        "revoked_count": revoked.value,
                    },
                )
            )
            await self.uow.commit()

            return Return.ok({"revoked_count": revoked.value})
