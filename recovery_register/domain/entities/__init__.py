"""
Recovery Register Domain Entities

All domain entities organized by model.
"""

from .enums import (
    ADMIN_ROLES,
    ContactPreference,
    IdentityType,
    Role,
    SecurityProfile,
    TrustLevel,
)
from .identity import Identity
from .session import AuthSession
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ADMIN_ROLES",
    "ContactPreference",
    "IdentityType",
    "Role",
    "SecurityProfile",
    "TrustLevel",
    # Entities
    "Identity",
    "AuthSession",
    "AuditEvent",
]
