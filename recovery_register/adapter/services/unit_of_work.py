from sqlmodel.ext.asyncio.session import AsyncSession

from recovery_register.adapter.repositories.audit_event_repository import AuditEventRepository
from recovery_register.adapter.repositories.identity_repository import IdentityRepository
from recovery_register.adapter.repositories.session_repository import SessionRepository
from recovery_register.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.identities = IdentityRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
