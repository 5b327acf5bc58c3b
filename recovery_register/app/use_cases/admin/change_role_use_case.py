"""
Change Role Use Case

Handles role changes for identities.
"""

from typing import Any, Dict

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.credential_store import CredentialStore
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.entities import ADMIN_ROLES, AuditEvent, AuthSession, Role
from recovery_register.libs.result import Error, Result, Return


class ChangeRoleUseCase:
    """
    Use case for changing an identity's role.

    Business Rules:
    - Role must be one of user, admin, super_admin
    - An admin cannot change their own role
    - Granting or removing admin/super_admin requires super_admin
    - Every session of the target is revoked, so no session ever carries
      a role that differs from the stored one
    - Creates audit event for compliance tracking
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(
        self, actor: AuthSession, target_id: int, new_role: str
    ) -> Result[Dict[str, Any]]:
        try:
            role = Role(new_role)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {new_role}. Must be one of: user, admin, super_admin",
                )
            )

        if actor.user_id == target_id:
            return Return.err(Error("CANNOT_CHANGE_OWN_ROLE", "You cannot change your own role"))

        async with self.uow:
            target = await self.uow.identities.get_by_id(target_id)
            if target is None:
                return Return.err(Error("IDENTITY_NOT_FOUND", "Identity not found"))

            touches_admin = target.role in ADMIN_ROLES or role in ADMIN_ROLES
            if touches_admin and actor.role != Role.super_admin:
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only super admins can grant or remove admin roles")
                )

            old_role = target.role.value
            updated = await CredentialStore(self.uow, self.settings).update_role(target, role)
            if updated.is_err():
                return updated

            revoked = await SessionTrustManager(self.uow, self.settings).revoke_all(target_id)
            if revoked.is_err():
                return revoked

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=actor.user_id,
                    action="role_changed",
                    event_metadata={
                        "target_user_id": target_id,
                        "old_role": old_role,
                        "new_role": role.value,
                    },
                )
            )
            await self.uow.commit()

            return Return.ok(
                {
                    "status": "updated",
                    "identity": {"id": target_id, "role": role.value},
                    "revoked_sessions": revoked.value,
                }
            )
