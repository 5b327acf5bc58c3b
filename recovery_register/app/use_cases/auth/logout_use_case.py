"""
Logout Use Case

Destroys the current session. Idempotent.
"""

from typing import Optional

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.session_manager import SessionTrustManager
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.libs.result import Result, Return

from .dtos import MessageResponse


class LogoutUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, current_token: Optional[str]) -> Result[MessageResponse]:
        async with self.uow:
            destroyed = await SessionTrustManager(self.uow, self.settings).destroy(current_token)
            if destroyed.is_err():
                return destroyed
            await self.uow.commit()
        return Return.ok(MessageResponse(message="Logged out successfully"))
