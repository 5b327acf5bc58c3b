"""
Identity Entity

Represents a registrant or administrator, pseudonymous or email-based.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import ContactPreference, IdentityType, Role, SecurityProfile


class Identity(SQLModel, table=True):
    """
    Identity entity - a principal capable of authenticating.

    Business Rules:
    - identity_type and is_anonymous are derived once at registration
    - is_anonymous is True iff no email was supplied; only cleared by adding an email
    - username and email are unique (enforced by the database)
    - Password stored as bcrypt hash, never exposed
    - Role only changes through an administrative action
    - Never hard-deleted, is_active=False disables login
    """

    __tablename__ = "identities"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: Optional[str] = Field(default=None, unique=True, index=True, max_length=64)
    email: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    identity_type: IdentityType = Field(default=IdentityType.pseudonym)
    is_anonymous: bool = Field(default=True)
    role: Role = Field(default=Role.user)
    security_profile: SecurityProfile = Field(default=SecurityProfile.basic)
    preferred_contact: ContactPreference = Field(default=ContactPreference.pseudonym)
    is_active: bool = Field(default=True)

    # Reserved for federation, never populated while OAuth is disabled
    oauth_provider: Optional[str] = Field(default=None, max_length=32)
    oauth_provider_id: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_identity_role", "role"),)
