"""
Auth Settings

Explicit policy object handed to every auth component. Nothing in the
auth core reads global configuration directly, so tests can run the same
components under stricter or looser policies side by side.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from recovery_register.domain.entities import SecurityProfile

NON_PRODUCTION_ENVIRONMENTS = frozenset({"development", "test"})

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

# Fallback SESSION_SECRET in config.py; only usable outside production
DEFAULT_SESSION_SECRET = "dev-session-secret-change-in-production"


class AuthSettings(BaseModel):
    environment: str = "production"
    dev_admin_bypass: bool = False

    session_secret: str = Field(..., min_length=1)
    session_cookie_name: str = "recovery_session"
    session_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    session_cookie_secure: Optional[bool] = None
    session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    session_cookie_domain: Optional[str] = None

    bcrypt_rounds: int = Field(default=12, ge=10, le=31)

    min_pseudonym_length: int = Field(default=2, ge=1)
    max_pseudonym_length: int = Field(default=20, ge=1)
    password_min_length: int = Field(default=6, ge=1)
    strict_password_min_length: int = Field(default=8, ge=1)
    password_require_number: bool = False
    password_require_special_char: bool = False
    password_require_uppercase: bool = False

    allow_pseudonymous_identity: bool = True
    oauth_enabled: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_session_secret(self) -> "AuthSettings":
        if self.is_production and self.session_secret == DEFAULT_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be set in production")
        return self

    @model_validator(mode="after")
    def check_pseudonym_lengths(self) -> "AuthSettings":
        if self.min_pseudonym_length > self.max_pseudonym_length:
            raise ValueError("min_pseudonym_length must not exceed max_pseudonym_length")
        return self

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            environment=config.ENVIRONMENT,
            dev_admin_bypass=config.DEV_ADMIN_BYPASS,
            session_secret=config.SESSION_SECRET,
            session_cookie_name=config.SESSION_COOKIE_NAME,
            session_ttl_seconds=config.SESSION_TTL_SECONDS,
            session_cookie_secure=config.SESSION_COOKIE_SECURE,
            session_cookie_samesite=config.SESSION_COOKIE_SAMESITE,
            session_cookie_domain=config.SESSION_COOKIE_DOMAIN,
            bcrypt_rounds=config.BCRYPT_ROUNDS,
            min_pseudonym_length=config.MIN_PSEUDONYM_LENGTH,
            max_pseudonym_length=config.MAX_PSEUDONYM_LENGTH,
            password_min_length=config.PASSWORD_MIN_LENGTH,
            strict_password_min_length=config.STRICT_PASSWORD_MIN_LENGTH,
            password_require_number=config.PASSWORD_REQUIRE_NUMBER,
            password_require_special_char=config.PASSWORD_REQUIRE_SPECIAL_CHAR,
            password_require_uppercase=config.PASSWORD_REQUIRE_UPPERCASE,
            allow_pseudonymous_identity=config.ALLOW_PSEUDONYMOUS_IDENTITY,
            oauth_enabled=config.OAUTH_ENABLED,
        )

    @property
    def is_production(self) -> bool:
        return self.environment not in NON_PRODUCTION_ENVIRONMENTS

    @property
    def dev_bypass_allowed(self) -> bool:
        # Both conditions must hold; an unset or misspelled environment is production
        return (not self.is_production) and self.dev_admin_bypass is True

    @property
    def cookie_secure(self) -> bool:
        # browsers reject SameSite=None without Secure
        if self.session_cookie_samesite == "none":
            return True
        if self.session_cookie_secure is None:
            return self.is_production
        return self.session_cookie_secure

    def password_min_length_for(self, profile: SecurityProfile) -> int:
        if profile == SecurityProfile.basic:
            return self.password_min_length
        return self.strict_password_min_length
