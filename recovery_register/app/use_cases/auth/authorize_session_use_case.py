"""
Authorize Session Use Case

Resolves the session cookie for protected routes. Admin routes also
re-check the identity's current role on every request.
"""

import logging
from typing import Optional

from recovery_register.app.services.auth_errors import FORBIDDEN, SESSION_INVALID
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import ADMIN_ROLES, AuthSession, TrustLevel
from recovery_register.libs.result import Result, Return

logger = logging.getLogger(__name__)


class AuthorizeSessionUseCase:
    """
    Business Rules:
    - Any live, unexpired session passes for regular routes (expiry rolls forward)
    - Admin routes need an Admin trust session; a User session gets FORBIDDEN
    - An Admin session whose identity is gone, inactive, or no longer holds
      the role recorded in the snapshot is revoked and treated as no session
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, token: Optional[str], require_admin: bool = False) -> Result[AuthSession]:
        async with self.uow:
            sessions = SessionTrustManager(self.uow, self.settings)
            validated = await sessions.validate(token)
            if validated.is_err():
                # Lazy expiry may have revoked the row
                await self.uow.commit()
                return validated
            session = validated.value

            if require_admin:
                if session.trust_level != TrustLevel.admin:
                    await self.uow.commit()
                    return Return.err(FORBIDDEN)

                identity = await self.uow.identities.get_by_id(session.user_id)
                if (
                    identity is None
                    or not identity.is_active
                    or identity.role not in ADMIN_ROLES
                    or identity.role != session.role
                ):
                    revoked = await sessions.revoke_by_id(session.id)
                    if revoked.is_err():
                        return revoked
                    await self.uow.commit()
                    logger.warning("Stale admin session %s revoked", session.id)
                    return Return.err(SESSION_INVALID)

            await self.uow.commit()
            return Return.ok(session)
