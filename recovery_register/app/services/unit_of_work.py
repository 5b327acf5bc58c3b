from abc import ABC, abstractmethod

from recovery_register.app.repositories.audit_event_repository import IAuditEventRepository
from recovery_register.app.repositories.identity_repository import IIdentityRepository
from recovery_register.app.repositories.session_repository import ISessionRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    identities: IIdentityRepository
    sessions: ISessionRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
