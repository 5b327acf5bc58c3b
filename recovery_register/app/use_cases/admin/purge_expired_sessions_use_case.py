"""
Purge Expired Sessions Use Case

Resource hygiene: expiry itself is enforced lazily on access, this only
removes rows that can never be valid again.
"""

from typing import Any, Dict

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.libs.result import Result, Return


class PurgeExpiredSessionsUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self) -> Result[Dict[str, Any]]:
        async with self.uow:
            purged = await SessionTrustManager(self.uow, self.settings).purge_expired()
            if purged.is_err():
                return purged
            await self.uow.commit()
            return Return.ok({"purged_count": purged.value})
