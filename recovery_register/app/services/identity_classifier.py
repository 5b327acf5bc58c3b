"""
Identity Classifier

Derives identity_type and anonymity from raw registration input and owns
the one identifier grammar used by registration, login and admin login:
an identifier is either a valid email address or a handle made of
letters, digits, "_" and "-" within the configured length bounds.
"""

import re
import string
from typing import Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from recovery_register.domain.entities import ContactPreference, IdentityType, SecurityProfile
from recovery_register.libs.result import Result, Return

from .auth_errors import validation_error
from .auth_settings import BCRYPT_MAX_PASSWORD_BYTES, AuthSettings

HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class RegistrationInput(BaseModel):
    pseudonym: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ClassifiedIdentity(BaseModel):
    identity_type: IdentityType
    is_anonymous: bool
    username: str
    email: Optional[str] = None
    preferred_contact: ContactPreference


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class IdentityClassifier:
    def __init__(self, settings: AuthSettings):
        self.settings = settings

    def classify(self, data: RegistrationInput) -> Result[ClassifiedIdentity]:
        """
        Validate registration input and derive the identity shape.

        Anonymity is never chosen by the caller: supplying an email is the
        decision to be identifiable.
        """
        errors: Dict[str, str] = {}
        pseudonym = _clean(data.pseudonym)
        email = _clean(data.email)

        if not pseudonym and not email:
            errors["identifier"] = "Either pseudonym or email is required"
        elif not email and not self.settings.allow_pseudonymous_identity:
            errors["email"] = "Email is required"

        if pseudonym:
            problem = self.check_handle(pseudonym, field_label="Pseudonym")
            if problem:
                errors["pseudonym"] = problem

        normalized_email = None
        if email:
            normalized_email = self.normalize_email(email)
            if normalized_email is None:
                errors["email"] = "Invalid email address"

        problem = self.check_password(data.password, SecurityProfile.basic)
        if problem:
            errors["password"] = problem

        if errors:
            return Return.err(validation_error(errors))

        username = pseudonym or normalized_email.split("@")[0]
        if normalized_email:
            identity_type = IdentityType.email
            preferred_contact = ContactPreference.email
        else:
            identity_type = IdentityType.pseudonym
            preferred_contact = ContactPreference.pseudonym

        return Return.ok(
            ClassifiedIdentity(
                identity_type=identity_type,
                is_anonymous=normalized_email is None,
                username=username,
                email=normalized_email,
                preferred_contact=preferred_contact,
            )
        )

    def validate_identifier(self, identifier: Optional[str]) -> Result[str]:
        """Returns the identifier in lookup form (emails lower-cased)."""
        identifier = _clean(identifier)
        if not identifier:
            return Return.err(validation_error({"identifier": "Identifier is required"}))

        if "@" in identifier:
            normalized = self.normalize_email(identifier)
            if normalized is None:
                return Return.err(validation_error({"identifier": "Invalid email address"}))
            return Return.ok(normalized)

        problem = self.check_handle(identifier, field_label="Username")
        if problem:
            return Return.err(validation_error({"identifier": problem}))
        return Return.ok(identifier)

    def validate_password(self, password: Optional[str], profile: SecurityProfile) -> Result[str]:
        problem = self.check_password(password, profile)
        if problem:
            return Return.err(validation_error({"password": problem}))
        return Return.ok(password)

    def check_handle(self, handle: str, field_label: str) -> Optional[str]:
        low = self.settings.min_pseudonym_length
        high = self.settings.max_pseudonym_length
        if len(handle) < low:
            return f"{field_label} must be at least {low} characters long"
        if len(handle) > high:
            return f"{field_label} must be at most {high} characters long"
        if not HANDLE_PATTERN.match(handle):
            return f"{field_label} may only contain letters, numbers, underscores and hyphens"
        return None

    def check_password(self, password: Optional[str], profile: SecurityProfile) -> Optional[str]:
        if not password:
            return "Password is required"
        minimum = self.settings.password_min_length_for(profile)
        if len(password) < minimum:
            return f"Password must be at least {minimum} characters long"
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            return f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long"
        if self.settings.password_require_number and not any(c.isdigit() for c in password):
            return "Password must contain a number"
        if self.settings.password_require_uppercase and not any(c.isupper() for c in password):
            return "Password must contain an uppercase letter"
        if self.settings.password_require_special_char and not any(
            c in string.punctuation for c in password
        ):
            return "Password must contain a special character"
        return None

    @staticmethod
    def normalize_email(email: str) -> Optional[str]:
        try:
            info = validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return None
        return info.normalized.lower()
