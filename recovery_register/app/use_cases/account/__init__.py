"""
Account Use Cases

Self-service changes to the signed-in identity.
"""

from .add_email_use_case import AddEmailUseCase
from .change_password_use_case import ChangePasswordUseCase
from .update_contact_preference_use_case import UpdateContactPreferenceUseCase

__all__ = [
    "AddEmailUseCase",
    "ChangePasswordUseCase",
    "UpdateContactPreferenceUseCase",
]
