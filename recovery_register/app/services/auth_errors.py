"""
Auth error catalogue.

Credential and session failures are shared module-level constants so every
code path reports exactly the same code and message.
"""

from typing import Dict

from recovery_register.libs.result import Error

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")
SESSION_INVALID = Error("SESSION_INVALID", "Authentication required")
SESSION_ERROR = Error("SESSION_ERROR", "Authentication error")
FORBIDDEN = Error("FORBIDDEN", "Forbidden")
OAUTH_DISABLED = Error("OAUTH_DISABLED", "OAuth sign-in is not available")


def validation_error(details: Dict[str, str]) -> Error:
    return Error("VALIDATION_ERROR", "Invalid input", details=dict(details))


def duplicate_identifier(field: str) -> Error:
    label = "Username" if field == "username" else "Email"
    return Error(
        "DUPLICATE_IDENTIFIER",
        f"{label} is already taken",
        details={field: f"{label} is already taken"},
    )
