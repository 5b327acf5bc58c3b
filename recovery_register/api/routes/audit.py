"""
Audit API Routes

Handles audit event retrieval endpoints.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from recovery_register.api.error import raise_for_error
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.audit import GetAuditEventsUseCase
from recovery_register.depends import get_unit_of_work, require_admin_session
from recovery_register.domain.entities import AuthSession

router = APIRouter(prefix="/admin/audit", tags=["Audit"])


class AuditEventResponse(BaseModel):
    """Single audit event in response"""

    action: str
    user_id: Optional[int]
    timestamp: str
    metadata: Dict[str, Any]


class AuditEventsResponse(BaseModel):
    """GET /admin/audit/auth-events response payload"""

    events: List[AuditEventResponse]
    next_cursor: Optional[str]


@router.get(
    "/auth-events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventsResponse,
)
async def get_auth_events(
    admin: AuthSession = Depends(require_admin_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    user_id: Optional[int] = Query(None, description="Only events for this identity"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Get Authentication Audit Events

    Returns:
        - events: List of audit events ordered by newest first
        - next_cursor: Cursor for next page (null if no more events)

    Raises:
        - 401 Unauthorized: no live admin session
        - 403 Forbidden: User-trust session
    """
    result = await GetAuditEventsUseCase(uow).execute(user_id=user_id, limit=limit, cursor=cursor)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
