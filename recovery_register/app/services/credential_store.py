"""
Credential Store Adapter

Hashes and verifies passwords and persists the minimal identity fields.
Callers own the unit-of-work transaction; nothing here commits.
"""

import logging
import secrets
from functools import lru_cache
from typing import Optional

import bcrypt

from recovery_register.app.repositories.identity_repository import IdentifierConflictError
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.base import utcnow
from recovery_register.domain.entities import (
    ADMIN_ROLES,
    ContactPreference,
    Identity,
    IdentityType,
    Role,
    SecurityProfile,
)
from recovery_register.libs.result import Error, Result, Return

from .auth_errors import INVALID_CREDENTIALS, OAUTH_DISABLED, duplicate_identifier
from .auth_settings import AuthSettings
from .client_sanitizer import mask_identifier
from .identity_classifier import ClassifiedIdentity

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))


def _conflict_field(exc: IdentifierConflictError) -> str:
    return "email" if "email" in str(exc).lower() else "username"


class CredentialStore:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(self.settings.bcrypt_rounds)
        ).decode("utf-8")

    async def create(
        self,
        classified: ClassifiedIdentity,
        password: str,
        role: Role = Role.user,
    ) -> Result[Identity]:
        """
        Persist a classified identity.

        The lookups give a friendly error for the common case; the unique
        constraints decide races between concurrent registrations.
        """
        if await self.uow.identities.get_by_username(classified.username):
            return Return.err(duplicate_identifier("username"))
        if classified.email and await self.uow.identities.get_by_email(classified.email):
            return Return.err(duplicate_identifier("email"))

        identity = Identity(
            username=classified.username,
            email=classified.email,
            password_hash=self.hash_password(password),
            identity_type=classified.identity_type,
            is_anonymous=classified.is_anonymous,
            role=role,
            security_profile=SecurityProfile.admin if role in ADMIN_ROLES else SecurityProfile.basic,
            preferred_contact=classified.preferred_contact,
        )
        try:
            identity = await self.uow.identities.create(identity)
        except IdentifierConflictError as exc:
            return Return.err(duplicate_identifier(_conflict_field(exc)))
        return Return.ok(identity)

    async def verify(self, identifier: str, password: str) -> Result[Identity]:
        """
        Check credentials against username OR email.

        Unknown identifier, wrong password and inactive identity all return
        the same INVALID_CREDENTIALS error.
        """
        identity = await self.uow.identities.get_by_identifier(identifier)
        password_bytes = (password or "").encode("utf-8")

        if identity is None:
            # Spend the same bcrypt time as a real check
            bcrypt.checkpw(password_bytes[:72], _dummy_hash(self.settings.bcrypt_rounds))
            logger.info("Credential check failed for %s: unknown", mask_identifier(identifier))
            return Return.err(INVALID_CREDENTIALS)

        if len(password_bytes) > 72 or not bcrypt.checkpw(
            password_bytes, identity.password_hash.encode("utf-8")
        ):
            logger.info("Credential check failed for %s: password", mask_identifier(identifier))
            return Return.err(INVALID_CREDENTIALS)

        if not identity.is_active:
            logger.info("Credential check failed for %s: inactive", mask_identifier(identifier))
            return Return.err(INVALID_CREDENTIALS)

        identity.last_login_at = utcnow()
        identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    def check_password(self, identity: Identity, password: Optional[str]) -> bool:
        password_bytes = (password or "").encode("utf-8")
        if not password_bytes or len(password_bytes) > 72:
            return False
        return bcrypt.checkpw(password_bytes, identity.password_hash.encode("utf-8"))

    async def update_email(self, identity: Identity, email: str) -> Result[Identity]:
        """
        Attach an email to an identity. This is the only way is_anonymous is
        cleared; identity_type keeps the value derived at registration.
        """
        existing = await self.uow.identities.get_by_email(email)
        if existing is not None and existing.id != identity.id:
            return Return.err(duplicate_identifier("email"))

        identity.email = email
        identity.is_anonymous = False
        identity.updated_at = utcnow()
        try:
            identity = await self.uow.identities.update(identity)
        except IdentifierConflictError:
            return Return.err(duplicate_identifier("email"))
        return Return.ok(identity)

    async def update_password(self, identity: Identity, new_password: str) -> Result[Identity]:
        identity.password_hash = self.hash_password(new_password)
        identity.updated_at = utcnow()
        identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    async def update_role(self, identity: Identity, role: Role) -> Result[Identity]:
        identity.role = role
        if role in ADMIN_ROLES:
            identity.security_profile = SecurityProfile.admin
        elif identity.security_profile == SecurityProfile.admin:
            identity.security_profile = SecurityProfile.basic
        identity.updated_at = utcnow()
        identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    async def update_contact_preference(
        self, identity: Identity, preference: ContactPreference
    ) -> Result[Identity]:
        if preference == ContactPreference.email and not identity.email:
            return Return.err(
                Error("CONTACT_UNAVAILABLE", "No email address on file for this account")
            )
        if preference == ContactPreference.pseudonym and not identity.username:
            return Return.err(
                Error("CONTACT_UNAVAILABLE", "No pseudonym on file for this account")
            )
        identity.preferred_contact = preference
        identity.updated_at = utcnow()
        identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    async def link_provider(
        self, identity: Identity, provider: str, provider_id: str
    ) -> Result[Identity]:
        # Federation is reserved; with OAuth disabled this is a refusal, not a write
        if not self.settings.oauth_enabled:
            return Return.err(OAUTH_DISABLED)
        identity.oauth_provider = provider
        identity.oauth_provider_id = provider_id
        identity.updated_at = utcnow()
        identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    async def unlink_provider(self, identity: Identity, provider: Optional[str] = None) -> Result[Identity]:
        if not self.settings.oauth_enabled:
            return Return.err(OAUTH_DISABLED)
        if provider is None or identity.oauth_provider == provider:
            identity.oauth_provider = None
            identity.oauth_provider_id = None
            identity.updated_at = utcnow()
            identity = await self.uow.identities.update(identity)
        return Return.ok(identity)

    async def create_unusable_password_identity(self, username: str, role: Role) -> Result[Identity]:
        """Identity nobody can log into with a password (dev bypass account)."""
        classified = ClassifiedIdentity(
            identity_type=IdentityType.pseudonym,
            is_anonymous=True,
            username=username,
            preferred_contact=ContactPreference.none,
        )
        return await self.create(classified, secrets.token_urlsafe(32), role=role)
