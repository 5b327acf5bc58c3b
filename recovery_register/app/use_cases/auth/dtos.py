"""
Authentication Use Case DTOs (Data Transfer Objects)

Every user-shaped object that leaves the auth core is built from a
sanitized record, never from the stored Identity directly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from recovery_register.app.services.client_sanitizer import sanitize
from recovery_register.domain.entities import (
    AuthSession,
    ContactPreference,
    Identity,
    IdentityType,
    Role,
    SecurityProfile,
    TrustLevel,
)


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Registration intent, unvalidated; the classifier owns validation"""

    pseudonym: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class CredentialsCommand(BaseModel):
    """Login / admin login intent"""

    identifier: Optional[str] = None
    password: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class SanitizedUser(BaseModel):
    """Client-safe projection of an Identity"""

    id: int
    username: Optional[str] = None
    identity_type: IdentityType
    is_anonymous: bool
    role: Role
    security_profile: SecurityProfile
    preferred_contact: ContactPreference
    created_at: Optional[datetime] = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "SanitizedUser":
        return cls.model_validate(sanitize(identity))


class SessionSnapshot(BaseModel):
    """Client-safe projection of the identity snapshot held by a session"""

    id: int
    username: Optional[str] = None
    security_profile: SecurityProfile
    is_anonymous: bool
    role: Role
    trust_level: TrustLevel

    @classmethod
    def from_session(cls, session: AuthSession) -> "SessionSnapshot":
        data = sanitize(session, extra_sensitive_fields=("token_hash",))
        data["id"] = session.user_id
        return cls.model_validate(data)


class AuthResponse(BaseModel):
    """Body returned by register / login / admin login"""

    message: str
    user: SanitizedUser


class MessageResponse(BaseModel):
    message: str


@dataclass(frozen=True)
class AuthOutcome:
    """Use case output: the response body plus the cookie token to set"""

    response: AuthResponse
    session_token: str
