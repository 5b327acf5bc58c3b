"""
Auth Core Services

Identity classification, credential storage, sanitization and session trust.
"""

from .auth_settings import AuthSettings
from .client_sanitizer import mask, mask_identifier, sanitize, sanitize_for_log, sanitize_many
from .credential_store import CredentialStore
from .identity_classifier import ClassifiedIdentity, IdentityClassifier, RegistrationInput
from .session_manager import IssuedSession, SessionTrustManager

__all__ = [
    "AuthSettings",
    "ClassifiedIdentity",
    "CredentialStore",
    "IdentityClassifier",
    "IssuedSession",
    "RegistrationInput",
    "SessionTrustManager",
    "mask",
    "mask_identifier",
    "sanitize",
    "sanitize_for_log",
    "sanitize_many",
]
