from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from recovery_register.domain.entities import AuthSession


class SessionStoreError(Exception):
    """Raised when the session store cannot complete a read or write"""


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[AuthSession]:
        """Get session by token digest"""
        pass

    @abstractmethod
    async def create(self, session: AuthSession) -> AuthSession:
        """Create a new session"""
        pass

    @abstractmethod
    async def touch(self, session_id: UUID, seen_at: datetime, expires_at: datetime) -> bool:
        """Roll the expiry of a live session forward. Returns False if it is no longer live."""
        pass

    @abstractmethod
    async def revoke_by_id(self, session_id: UUID) -> bool:
        """Revoke a specific session. Returns True if session existed and was revoked."""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: int) -> int:
        """Revoke all sessions for an identity. Returns count of revoked sessions."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete expired or revoked session rows. Returns count."""
        pass
