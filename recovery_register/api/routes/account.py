from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from recovery_register.api.error import raise_for_error
from recovery_register.api.utils.session_cookie import set_session_cookie
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.app.services.unit_of_work import UnitOfWork
from recovery_register.app.use_cases.account import (
    AddEmailUseCase,
    ChangePasswordUseCase,
    UpdateContactPreferenceUseCase,
)
from recovery_register.app.use_cases.auth import AuthResponse, SanitizedUser
from recovery_register.depends import (
    get_auth_settings,
    get_session_token,
    get_unit_of_work,
    require_session,
)
from recovery_register.domain.entities import AuthSession

router = APIRouter(prefix="/account", tags=["Account"])


class AddEmailRequest(BaseModel):
    email: Optional[str] = Field(None, max_length=320, description="Email to attach")


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = Field(None, max_length=1024)
    new_password: Optional[str] = Field(None, max_length=1024)


class ContactPreferenceRequest(BaseModel):
    preferred_contact: str = Field(..., description="none, pseudonym or email")


@router.put("/email", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def add_email(
    request: AddEmailRequest,
    response: Response,
    session: AuthSession = Depends(require_session),
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Add Email (identity upgrade)

    Attaches an email and clears the anonymous flag. Issues a new session id.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR or DUPLICATE_IDENTIFIER
        - 401 Unauthorized: SESSION_INVALID
    """
    result = await AddEmailUseCase(uow, settings).execute(session, request.email, token)
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response


@router.put("/password", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def change_password(
    request: ChangePasswordRequest,
    response: Response,
    session: AuthSession = Depends(require_session),
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Change Password

    Revokes every session of the identity and issues a fresh one.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (new password policy)
        - 401 Unauthorized: INVALID_CREDENTIALS (current password) or SESSION_INVALID
    """
    result = await ChangePasswordUseCase(uow, settings).execute(
        session, request.current_password, request.new_password, token
    )
    if result.is_err():
        raise_for_error(result.error)

    set_session_cookie(response, result.value.session_token, settings)
    return result.value.response


@router.put("/contact-preference", status_code=status.HTTP_200_OK, response_model=SanitizedUser)
async def update_contact_preference(
    request: ContactPreferenceRequest,
    session: AuthSession = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Update Contact Preference

    Raises:
        - 400 Bad Request: VALIDATION_ERROR or CONTACT_UNAVAILABLE
        - 401 Unauthorized: SESSION_INVALID
    """
    result = await UpdateContactPreferenceUseCase(uow, settings).execute(
        session, request.preferred_contact
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value
