"""
Session Entity

Server-held proof of a successful authentication.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import Role, SecurityProfile, TrustLevel


class AuthSession(SQLModel, table=True):
    """
    Session entity - one authenticated browser context.

    Business Rules:
    - The cookie carries an opaque token; only its keyed digest is stored
    - A new token is issued on every login/elevation (session fixation)
    - The snapshot never holds the password hash, email or phone
    - role matches the identity's role at the last regeneration
    - expires_at rolls forward on every validated access
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    # Identity snapshot
    user_id: int = Field(foreign_key="identities.id", nullable=False, index=True)
    username: Optional[str] = Field(default=None, max_length=64)
    security_profile: SecurityProfile = Field(default=SecurityProfile.basic)
    is_anonymous: bool = Field(default=True)
    role: Role = Field(default=Role.user)

    trust_level: TrustLevel = Field(default=TrustLevel.user)
    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_seen_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_revoked", "revoked"),
    )
