from abc import ABC, abstractmethod
from typing import List, Optional

from recovery_register.domain.entities import Identity


class IdentifierConflictError(Exception):
    """Raised when a unique username/email constraint rejects a write"""


class IIdentityRepository(ABC):
    """Identity repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, identity_id: int) -> Optional[Identity]:
        """Get identity by ID"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[Identity]:
        """Get identity by exact username"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by (lower-cased) email"""
        pass

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> Optional[Identity]:
        """Get identity whose username OR email equals the identifier"""
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """Create a new identity. Raises IdentifierConflictError on a unique violation."""
        pass

    @abstractmethod
    async def update(self, identity: Identity) -> Identity:
        """Update existing identity. Raises IdentifierConflictError on a unique violation."""
        pass

    @abstractmethod
    async def list(self, limit: int = 50, offset: int = 0) -> List[Identity]:
        """List identities ordered by id"""
        pass
