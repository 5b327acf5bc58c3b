"""
AuditEvent Entity

Immutable log of authentication/authorization events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of auth events.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id nullable for events without a resolved identity (failed login)
    - Metadata is passed through the log sanitizer: no passwords,
      no raw identifiers, no email addresses
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[int] = Field(default=None, index=True)
    action: str = Field(max_length=100)  # e.g., "login", "register"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_user_action", "user_id", "action"),
    )
