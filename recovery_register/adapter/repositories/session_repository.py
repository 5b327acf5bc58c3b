from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import delete, or_, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from recovery_register.app.repositories.session_repository import (
    ISessionRepository,
    SessionStoreError,
)
from recovery_register.domain.base import utcnow
from recovery_register.domain.entities import AuthSession


class SessionRepository(ISessionRepository):
    """
    Session repository implementation using SQLModel.

    Every mutation is a single UPDATE/DELETE statement so concurrent
    requests for the same session never interleave a read-modify-write.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token_hash(self, token_hash: str) -> Optional[AuthSession]:
        stmt = select(AuthSession).where(AuthSession.token_hash == token_hash)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise SessionStoreError("session lookup failed") from exc
        return result.scalar_one_or_none()

    async def create(self, session_obj: AuthSession) -> AuthSession:
        self.session.add(session_obj)
        try:
            await self.session.flush()
            await self.session.refresh(session_obj)
        except SQLAlchemyError as exc:
            raise SessionStoreError("session create failed") from exc
        return session_obj

    async def touch(self, session_id: UUID, seen_at: datetime, expires_at: datetime) -> bool:
        stmt = (
            update(AuthSession)
            .where(
                AuthSession.id == session_id,
                AuthSession.revoked == False,  # noqa: E712
                AuthSession.expires_at > seen_at,
            )
            .values(last_seen_at=seen_at, expires_at=expires_at)
        )
        result = await self._execute(stmt, "session refresh failed")
        return result.rowcount > 0

    async def revoke_by_id(self, session_id: UUID) -> bool:
        stmt = (
            update(AuthSession)
            .where(AuthSession.id == session_id, AuthSession.revoked == False)  # noqa: E712
            .values(revoked=True, revoked_at=utcnow())
        )
        result = await self._execute(stmt, "session revoke failed")
        return result.rowcount > 0

    async def revoke_all_by_user_id(self, user_id: int) -> int:
        stmt = (
            update(AuthSession)
            .where(AuthSession.user_id == user_id, AuthSession.revoked == False)  # noqa: E712
            .values(revoked=True, revoked_at=utcnow())
        )
        result = await self._execute(stmt, "session revoke failed")
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(AuthSession).where(
            or_(AuthSession.expires_at <= now, AuthSession.revoked == True)  # noqa: E712
        )
        result = await self._execute(stmt, "session purge failed")
        return result.rowcount

    async def _execute(self, stmt, failure: str):
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise SessionStoreError(failure) from exc
        return result
