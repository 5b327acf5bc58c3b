"""
Admin Use Cases

Administrative actions available to Admin-trust sessions.
"""

from .list_identities_use_case import ListIdentitiesUseCase
from .change_role_use_case import ChangeRoleUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .purge_expired_sessions_use_case import PurgeExpiredSessionsUseCase

__all__ = [
    "ListIdentitiesUseCase",
    "ChangeRoleUseCase",
    "RevokeSessionsUseCase",
    "PurgeExpiredSessionsUseCase",
]
