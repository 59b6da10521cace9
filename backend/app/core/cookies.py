from fastapi import Request, Response

from app.core.config import settings
from app.core.security import create_access_token, create_refresh_token


ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _is_secure(request: Request) -> bool:
    return request.url.scheme == "https" or request.headers.get("x-forwarded-proto") == "https"


def set_access_cookie(response: Response, request: Request, token: str) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=_is_secure(request),
        samesite="lax",
    )


def set_refresh_cookie(response: Response, request: Request, token: str) -> None:
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        max_age=settings.refresh_token_expire_minutes * 60,
        httponly=True,
        secure=_is_secure(request),
        samesite="lax",
    )


def issue_tokens(response: Response, request: Request, user_id: int) -> tuple[str, str]:
    """Create an access/refresh pair for ``user_id`` and set both cookies."""
    access = create_access_token(user_id)
    refresh = create_refresh_token(user_id)
    set_access_cookie(response, request, access)
    set_refresh_cookie(response, request, refresh)
    return access, refresh


def clear_tokens(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, httponly=True)
    response.delete_cookie(REFRESH_COOKIE, httponly=True)
