"""
Recovery Register Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class IdentityType(str, Enum):
    """How an identity was established at registration"""

    pseudonym = "pseudonym"
    email = "email"
    oauth = "oauth"  # reserved, federation is not implemented


class Role(str, Enum):
    """Identity role"""

    user = "user"
    admin = "admin"
    super_admin = "super_admin"


ADMIN_ROLES = frozenset({Role.admin, Role.super_admin})


class SecurityProfile(str, Enum):
    """Gates password policy strictness"""

    basic = "basic"
    advanced = "advanced"
    admin = "admin"


class ContactPreference(str, Enum):
    """How (if at all) an identity wishes to be contacted"""

    none = "none"
    pseudonym = "pseudonym"
    email = "email"


class TrustLevel(str, Enum):
    """Trust level carried by a live session. Anonymous means no session."""

    user = "user"
    admin = "admin"
