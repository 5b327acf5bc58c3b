"""
Admin API Routes

Every endpoint requires an Admin-trust session; the identity's stored
role is re-checked on each request.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from recovery_register.api.error import raise_for_error
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.admin import (
    ChangeRoleUseCase,
    ListIdentitiesUseCase,
    PurgeExpiredSessionsUseCase,
    RevokeSessionsUseCase,
)
from recovery_register.depends import get_auth_settings, get_unit_of_work, require_admin_session
from recovery_register.domain.entities import AuthSession

router = APIRouter(prefix="/admin", tags=["Admin"])


class IdentitiesResponse(BaseModel):
    identities: List[Dict[str, Any]]
    limit: int
    offset: int


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="user, admin or super_admin")


class ChangeRoleResponse(BaseModel):
    status: str
    identity: Dict[str, Any]
    revoked_sessions: int


class RevokeSessionsResponse(BaseModel):
    message: str
    revoked_count: int


class PurgeSessionsResponse(BaseModel):
    purged_count: int


@router.get("/identities", status_code=status.HTTP_200_OK, response_model=IdentitiesResponse)
async def list_identities(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: AuthSession = Depends(require_admin_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Identities

    Admin dashboard listing with masked contact details.

    Raises:
        - 401 Unauthorized: no live admin session
        - 403 Forbidden: User-trust session
    """
    result = await ListIdentitiesUseCase(uow).execute(limit=limit, offset=offset)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put(
    "/identities/{identity_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=ChangeRoleResponse,
)
async def change_role(
    identity_id: int,
    request: ChangeRoleRequest,
    admin: AuthSession = Depends(require_admin_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Change Role

    Revokes all sessions of the target so the new role only takes effect
    through a fresh login.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: INSUFFICIENT_ROLE, CANNOT_CHANGE_OWN_ROLE
        - 404 Not Found: IDENTITY_NOT_FOUND
    """
    result = await ChangeRoleUseCase(uow, settings).execute(admin, identity_id, request.role)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/identities/{identity_id}/revoke-sessions",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_sessions(
    identity_id: int,
    admin: AuthSession = Depends(require_admin_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Revoke Sessions

    Raises:
        - 404 Not Found: IDENTITY_NOT_FOUND
    """
    result = await RevokeSessionsUseCase(uow, settings).execute(admin, identity_id)
    if result.is_err():
        raise_for_error(result.error)

    count = result.value["revoked_count"]
    return {"message": f"Successfully revoked {count} session(s)", "revoked_count": count}


@router.post(
    "/sessions/purge-expired",
    status_code=status.HTTP_200_OK,
    response_model=PurgeSessionsResponse,
)
async def purge_expired_sessions(
    admin: AuthSession = Depends(require_admin_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """Delete expired and revoked session rows."""
    result = await PurgeExpiredSessionsUseCase(uow, settings).execute()
    if result.is_err():
        raise_for_error(result.error)
    return result.value
