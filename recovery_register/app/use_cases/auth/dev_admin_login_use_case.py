"""
Dev Admin Login Use Case

Issues an admin session without credentials. Development and test
environments only, and only with the bypass flag switched on.
"""

import logging
from typing import Optional

from recovery_register.app.services.auth_errors import FORBIDDEN
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import ADMIN_ROLES, AuditEvent, Role
from recovery_register.libs.result import Result, Return

from .dtos import AuthOutcome, AuthResponse, SanitizedUser

logger = logging.getLogger(__name__)

DEV_ADMIN_USERNAME = "dev-admin"


class DevAdminLoginUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, current_token: Optional[str] = None) -> Result[AuthOutcome]:
        if not self.settings.dev_bypass_allowed:
            return Return.err(FORBIDDEN)

        async with self.uow:
            identity = await self.uow.identities.get_by_username(DEV_ADMIN_USERNAME)
            if identity is None:
                store = CredentialStore(self.uow, self.settings)
                created = await store.create_unusable_password_identity(DEV_ADMIN_USERNAME, Role.admin)
                if created.is_err():
                    return created
                identity = created.value
            elif identity.role not in ADMIN_ROLES or not identity.is_active:
                logger.warning("Dev admin bypass refused: %s is not an active admin", DEV_ADMIN_USERNAME)
                return Return.err(FORBIDDEN)

            sessions = SessionTrustManager(self.uow, self.settings)
            issued = await sessions.elevate(identity, current_token)
            if issued.is_err():
                return issued

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=identity.id,
                    action="dev_admin_login",
                    event_metadata={"environment": self.settings.environment},
                )
            )
            await self.uow.commit()

            logger.warning("Dev admin bypass used in %s environment", self.settings.environment)
            return Return.ok(
                AuthOutcome(
                    response=AuthResponse(
                        message="Development admin session issued",
                        user=SanitizedUser.from_identity(identity),
                    ),
                    session_token=issued.value.token,
                )
            )
