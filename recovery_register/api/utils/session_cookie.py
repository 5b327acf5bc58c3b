"""
Session Cookie

The cookie is the only transport for the session token: httponly always,
secure outside development/test, max_age equal to the rolling TTL. It is
re-issued on every validated request so the browser expiry rolls with the
server-side one.
"""

from typing import Optional

from fastapi import Request, Response

from recovery_register.app.services.auth_settings import AuthSettings


def read_session_token(request: Request, settings: AuthSettings) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or None


def _drop_pending_session_cookie(response: Response, settings: AuthSettings) -> None:
    # One Set-Cookie per response for the session cookie; the newest wins
    prefix = f"{settings.session_cookie_name}=".encode("latin-1")
    response.raw_headers[:] = [
        (name, value)
        for name, value in response.raw_headers
        if not (name == b"set-cookie" and value.startswith(prefix))
    ]


def set_session_cookie(response: Response, token: str, settings: AuthSettings) -> None:
    _drop_pending_session_cookie(response, settings)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        path="/",
        domain=settings.session_cookie_domain,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.session_cookie_samesite,
    )


def clear_session_cookie(response: Response, settings: AuthSettings) -> None:
    _drop_pending_session_cookie(response, settings)
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        domain=settings.session_cookie_domain,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.session_cookie_samesite,
    )
