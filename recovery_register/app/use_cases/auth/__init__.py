"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .admin_login_use_case import AdminLoginUseCase
from .dev_admin_login_use_case import DevAdminLoginUseCase
from .authorize_session_use_case import AuthorizeSessionUseCase
from .dtos import (
    AuthOutcome,
    AuthResponse,
    CredentialsCommand,
    MessageResponse,
    RegisterCommand,
    SanitizedUser,
    SessionSnapshot,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "AdminLoginUseCase",
    "DevAdminLoginUseCase",
    "AuthorizeSessionUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "CredentialsCommand",
    # DTOs - Responses
    "AuthOutcome",
    "AuthResponse",
    "MessageResponse",
    "SanitizedUser",
    "SessionSnapshot",
]
