from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from recovery_register.api.error import ClientError, raise_for_error
from recovery_register.api.utils.session_cookie import clear_session_cookie, set_session_cookie
from recovery_register.app.services.auth_errors import FORBIDDEN
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.auth import (
    AdminLoginUseCase,
    AuthResponse,
    CredentialsCommand,
    DevAdminLoginUseCase,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RegisterCommand,
    RegisterUseCase,
    SessionSnapshot,
)
from recovery_register.depends import (
    get_auth_settings,
    get_session_token,
    get_unit_of_work,
    require_session,
)
from recovery_register.domain.entities import AuthSession

router = APIRouter(prefix="/auth", tags=["Authentication"])


def require_dev_bypass(settings: AuthSettings = Depends(get_auth_settings)) -> None:
    if not settings.dev_bypass_allowed:
        raise ClientError(FORBIDDEN, status_code=status.HTTP_403_FORBIDDEN)


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Shape only; the identity classifier owns the validation rules so they
    can follow the configured policy.
    """

    pseudonym: Optional[str] = Field(None, max_length=255, description="Pseudonym / nickname")
    email: Optional[str] = Field(None, max_length=320, description="Optional email address")
    password: Optional[str] = Field(None, max_length=1024, description="Account password")


class CredentialsRequest(BaseModel):
    """Login / admin login payload: identifier is a pseudonym or an email"""

    identifier: Optional[str] = Field(None, max_length=320)
    password: Optional[str] = Field(None, max_length=1024)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Register

    Creates a pseudonymous or email identity and signs it in. Supplying an
    email is what makes the identity non-anonymous.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR or DUPLICATE_IDENTIFIER
        - 500 Internal Server Error: SESSION_ERROR
    """
    command = RegisterCommand(
        pseudonym=request.pseudonym, email=request.email, password=request.password
    )
    result = await RegisterUseCase(uow, settings).execute(command, current_token=token)
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: CredentialsRequest,
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Login

    Accepts a pseudonym or an email as identifier. Issues a new session id.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (identifier grammar, missing password)
        - 401 Unauthorized: INVALID_CREDENTIALS (same for unknown identifier and wrong password)
        - 500 Internal Server Error: SESSION_ERROR
    """
    command = CredentialsCommand(identifier=request.identifier, password=request.password)
    result = await LoginUseCase(uow, settings).execute(command, current_token=token)
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Logout

    Destroys the current session. Succeeds with or without a session.

    Raises:
        - 500 Internal Server Error: SESSION_ERROR
    """
    result = await LogoutUseCase(uow, settings).execute(token)
    if result.is_err():
        raise_for_error(result.error)

    clear_session_cookie(response, settings)
    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=SessionSnapshot)
async def me(session: AuthSession = Depends(require_session)):
    """
    Current session snapshot

    Served from the session, not re-read from the identity store.

    Raises:
        - 401 Unauthorized: SESSION_INVALID
    """
    return SessionSnapshot.from_session(session)


@router.post("/admin/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def admin_login(
    request: CredentialsRequest,
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Admin Login

    Re-verifies credentials and requires role admin or super_admin.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: INVALID_CREDENTIALS (also for accounts without an admin role)
        - 500 Internal Server Error: SESSION_ERROR
    """
    command = CredentialsCommand(identifier=request.identifier, password=request.password)
    result = await AdminLoginUseCase(uow, settings).execute(command, current_token=token)
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response


@router.post(
    "/dev-admin-login",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    dependencies=[Depends(require_dev_bypass)],
)
async def dev_admin_login(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Development Admin Login

    Issues an admin session without credentials. Only when ENVIRONMENT is
    development/test AND DEV_ADMIN_BYPASS is set; otherwise inert.

    Raises:
        - 403 Forbidden: FORBIDDEN in any other configuration
    """
    if not settings.dev_bypass_allowed:
        raise ClientError(FORBIDDEN, status_code=status.HTTP_403_FORBIDDEN)

    result = await DevAdminLoginUseCase(uow, settings).execute(current_token=token)
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response
