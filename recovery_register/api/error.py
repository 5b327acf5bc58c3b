from typing import Dict

from fastapi import status

from recovery_register.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


CLIENT_ERROR_STATUS: Dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "DUPLICATE_IDENTIFIER": status.HTTP_400_BAD_REQUEST,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "CONTACT_UNAVAILABLE": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "SESSION_INVALID": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "CANNOT_CHANGE_OWN_ROLE": status.HTTP_403_FORBIDDEN,
    "IDENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "OAUTH_DISABLED": status.HTTP_501_NOT_IMPLEMENTED,
}


def raise_for_error(error: Error) -> None:
    """Map a use case error code to the HTTP exception the handlers render."""
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
