from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from recovery_register.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from recovery_register.api.error import raise_for_error
from recovery_register.api.utils.session_cookie import read_session_token, set_session_cookie
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.auth import AuthorizeSessionUseCase
from recovery_register.domain.entities import AuthSession

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings.from_config(ApplicationConfig)


def get_session_token(
    request: Request, settings: AuthSettings = Depends(get_auth_settings)
) -> Optional[str]:
    return read_session_token(request, settings)


async def require_session(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
) -> AuthSession:
    """
    Dependency for routes that need a live session (User or Admin).
    Re-issues the cookie with a fresh max_age so it rolls with the session.

    Raises:
        ClientError: 401 if the session is missing, unknown, revoked or expired
    """
    result = await AuthorizeSessionUseCase(uow, settings).execute(token)
    if result.is_err():
        raise_for_error(result.error)
    set_session_cookie(response, token, settings)
    return result.value


async def require_admin_session(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
) -> AuthSession:
    """
    Dependency for admin routes. The stored role is re-checked on every request.

    Raises:
        ClientError: 401 without a live session, 403 for a User-trust session
    """
    result = await AuthorizeSessionUseCase(uow, settings).execute(token, require_admin=True)
    if result.is_err():
        raise_for_error(result.error)
    set_session_cookie(response, token, settings)
    return result.value
