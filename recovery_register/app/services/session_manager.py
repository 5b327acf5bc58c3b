"""
Session Trust Manager

Owns the session lifecycle and the three trust levels:

    Anonymous (no session) -> User -> Admin

Every transition into User or Admin regenerates the session: whatever
session the incoming cookie referenced is revoked and a brand-new random
token is issued. A token supplied by the client is never adopted.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

from recovery_register.app.repositories.session_repository import SessionStoreError
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.domain.base import utcnow
from recovery_register.domain.entities import ADMIN_ROLES, AuthSession, Identity, TrustLevel
from recovery_register.libs.result import Result, Return

from .auth_errors import INVALID_CREDENTIALS, SESSION_ERROR, SESSION_INVALID
from .auth_settings import AuthSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    token: str
    session: AuthSession


class SessionTrustManager:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    def digest(self, token: str) -> str:
        return hmac.new(
            self.settings.session_secret.encode("utf-8"),
            token.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    async def establish(
        self,
        identity: Identity,
        level: TrustLevel = TrustLevel.user,
        current_token: Optional[str] = None,
    ) -> Result[IssuedSession]:
        """Regenerate: revoke the current session (if any) and issue a new one."""
        token = secrets.token_urlsafe(32)
        now = utcnow()
        try:
            if current_token:
                await self._revoke_token(current_token)
            session = AuthSession(
                token_hash=self.digest(token),
                user_id=identity.id,
                username=identity.username,
                security_profile=identity.security_profile,
                is_anonymous=identity.is_anonymous,
                role=identity.role,
                trust_level=level,
                created_at=now,
                last_seen_at=now,
                expires_at=now + timedelta(seconds=self.settings.session_ttl_seconds),
            )
            session = await self.uow.sessions.create(session)
        except SessionStoreError:
            logger.exception("Session regenerate failed for identity %s", identity.id)
            return Return.err(SESSION_ERROR)

        logger.info("Session established for identity %s at trust level %s", identity.id, level.value)
        return Return.ok(IssuedSession(token=token, session=session))

    async def elevate(self, identity: Identity, current_token: Optional[str] = None) -> Result[IssuedSession]:
        """
        User -> Admin. The caller must already have re-verified credentials;
        a non-admin role is refused with the generic credentials error.
        """
        if identity.role not in ADMIN_ROLES:
            return Return.err(INVALID_CREDENTIALS)
        return await self.establish(identity, TrustLevel.admin, current_token)

    async def validate(self, token: Optional[str]) -> Result[AuthSession]:
        """
        Resolve a cookie token to a live session and roll its expiry forward.

        Missing, unknown, revoked and expired sessions all produce the same
        SESSION_INVALID error; the reason is only logged.
        """
        if not token:
            logger.debug("Session check failed: no cookie")
            return Return.err(SESSION_INVALID)

        now = utcnow()
        try:
            session = await self.uow.sessions.get_by_token_hash(self.digest(token))
            if session is None:
                logger.info("Session check failed: unknown token")
                return Return.err(SESSION_INVALID)
            if session.revoked:
                logger.info("Session check failed: session %s revoked", session.id)
                return Return.err(SESSION_INVALID)
            if session.expires_at <= now:
                await self.uow.sessions.revoke_by_id(session.id)
                logger.info("Session check failed: session %s expired", session.id)
                return Return.err(SESSION_INVALID)

            expires_at = now + timedelta(seconds=self.settings.session_ttl_seconds)
            if not await self.uow.sessions.touch(session.id, now, expires_at):
                logger.info("Session check failed: session %s no longer live", session.id)
                return Return.err(SESSION_INVALID)
        except SessionStoreError:
            logger.exception("Session lookup failed")
            return Return.err(SESSION_ERROR)

        return Return.ok(session)

    async def destroy(self, token: Optional[str]) -> Result[bool]:
        """Idempotent: destroying nothing, or an already dead session, succeeds."""
        if not token:
            return Return.ok(False)
        try:
            revoked = await self._revoke_token(token)
        except SessionStoreError:
            logger.exception("Session destroy failed")
            return Return.err(SESSION_ERROR)
        return Return.ok(revoked)

    async def revoke_all(self, user_id: int) -> Result[int]:
        try:
            count = await self.uow.sessions.revoke_all_by_user_id(user_id)
        except SessionStoreError:
            logger.exception("Session revoke failed for identity %s", user_id)
            return Return.err(SESSION_ERROR)
        logger.info("Revoked %s session(s) for identity %s", count, user_id)
        return Return.ok(count)

    async def revoke_by_id(self, session_id: UUID) -> Result[bool]:
        try:
            revoked = await self.uow.sessions.revoke_by_id(session_id)
        except SessionStoreError:
            logger.exception("Session revoke failed for session %s", session_id)
            return Return.err(SESSION_ERROR)
        return Return.ok(revoked)

    async def purge_expired(self) -> Result[int]:
        try:
            count = await self.uow.sessions.delete_expired(utcnow())
        except SessionStoreError:
            logger.exception("Session purge failed")
            return Return.err(SESSION_ERROR)
        logger.info("Purged %s expired or revoked session(s)", count)
        return Return.ok(count)

    async def _revoke_token(self, token: str) -> bool:
        session = await self.uow.sessions.get_by_token_hash(self.digest(token))
        if session is None:
            return False
        return await self.uow.sessions.revoke_by_id(session.id)
