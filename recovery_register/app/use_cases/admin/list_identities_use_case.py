"""
List Identities Use Case

Admin dashboard listing. Contact details are masked, never shown in full.
"""

from typing import Any, Dict

from recovery_register.app.services.client_sanitizer import mask
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.libs.result import Result, Return


class ListIdentitiesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, limit: int = 50, offset: int = 0) -> Result[Dict[str, Any]]:
        async with self.uow:
            identities = await self.uow.identities.list(limit=limit, offset=offset)
            return Return.ok(
                {
                    "identities": [
                        mask(identity, extra_sensitive_fields=("oauth_provider_id",))
                        for identity in identities
                    ],
                    "limit": limit,
                    "offset": offset,
                }
            )
