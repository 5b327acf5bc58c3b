from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from recovery_register.app.repositories.identity_repository import (
    IdentifierConflictError,
    IIdentityRepository,
)
from recovery_register.domain.entities import Identity


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, identity_id: int) -> Optional[Identity]:
        stmt = select(Identity).where(Identity.id == identity_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[Identity]:
        stmt = select(Identity).where(Identity.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[Identity]:
        stmt = select(Identity).where(Identity.email == email.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_identifier(self, identifier: str) -> Optional[Identity]:
        """
        Single query over both columns.

        A handle can never contain "@", so at most one row matches each
        column; username wins if both somehow match.
        """
        stmt = (
            select(Identity)
            .where(
                or_(
                    Identity.username == identifier,
                    Identity.email == identifier.lower(),
                )
            )
            .order_by(Identity.id)
        )
        result = await self.session.exec(stmt)
        candidates = list(result.all())
        for identity in candidates:
            if identity.username == identifier:
                return identity
        return candidates[0] if candidates else None

    async def create(self, identity: Identity) -> Identity:
        return await self._write(identity)

    async def update(self, identity: Identity) -> Identity:
        return await self._write(identity)

    async def list(self, limit: int = 50, offset: int = 0) -> List[Identity]:
        stmt = select(Identity).order_by(Identity.id).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def _write(self, identity: Identity) -> Identity:
        self.session.add(identity)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise IdentifierConflictError(str(exc.orig)) from exc
        await self.session.refresh(identity)
        return identity
