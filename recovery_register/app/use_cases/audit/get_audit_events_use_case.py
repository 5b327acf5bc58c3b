"""
Get Audit Events Use Case

Retrieves authentication audit events with pagination.
"""

from typing import Any, Dict, Optional

from recovery_register.app.services.client_sanitizer import sanitize_for_log
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.libs.result import Result, Return


class GetAuditEventsUseCase:
    """
    Use case for retrieving audit events.

    Business Rules:
    - Caller holds an Admin session (enforced by the route dependency)
    - Optionally scoped to one identity
    - Results ordered by newest first
    - Supports cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: Optional[int] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_paginated(
                user_id=user_id, limit=limit, cursor=cursor
            )

            events_list = [
                {
                    "action": event.action,
                    "user_id": event.user_id,
                    "timestamp": event.created_at.isoformat() + "Z",
                    "metadata": sanitize_for_log(event.event_metadata or {}),
                }
                for event in events
            ]

            return Return.ok({"events": events_list, "next_cursor": next_cursor})
