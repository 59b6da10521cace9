import logging
from typing import Any, Optional

from fastapi import Body, Depends, Header, Request, Response
from sqlalchemy.orm import Session

from app.core.cookies import ACCESS_COOKIE, REFRESH_COOKIE, set_access_cookie
from app.core.database import get_db
from app.core.errors import AppError
from app.core.roles import Role
from app.core.security import (
    ACCESS,
    REFRESH,
    TokenExpired,
    TokenInvalid,
    changed_password_after,
    create_access_token,
    decode_token,
    verify_password,
)
from app.models.user import User


logger = logging.getLogger(__name__)


def session_expired(message: str = "Your session has expired. Please log in again.") -> AppError:
    return AppError(401, "SESSION_EXPIRED", message)


def invalid_tokens() -> AppError:
    return AppError(401, "INVALID_TOKENS", "Your session is invalid. Please log in again.")


def account_disabled() -> AppError:
    return AppError(401, "ACCOUNT_DISABLED", "Your account has been disabled. Please contact an administrator.")


def _verify(token: str, token_type: str) -> Optional[dict[str, Any]]:
    """Claims of a valid token, None when expired; invalid tokens raise."""
    try:
        return decode_token(token, token_type)
    except TokenExpired:
        return None
    except TokenInvalid:
        raise invalid_tokens()


def get_current_user(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
) -> User:
    if authorization and authorization.startswith("Bearer"):
        parts = authorization.split(" ", 1)
        access_token = parts[1].strip() if len(parts) > 1 else None
    else:
        access_token = request.cookies.get(ACCESS_COOKIE)
    refresh_token = request.cookies.get(REFRESH_COOKIE)

    if not access_token and not refresh_token:
        raise session_expired()

    claims = _verify(access_token, ACCESS) if access_token else None

    if claims is None:
        if not refresh_token:
            raise session_expired()
        claims = _verify(refresh_token, REFRESH)
        if claims is None:
            raise session_expired()
        # Refresh token still good: hand out a new access token
        set_access_cookie(response, request, create_access_token(claims["id"]))
        logger.info("Issued new access token from refresh token for user_id=%s", claims["id"])

    user_id = claims.get("id")
    if user_id is None:
        raise invalid_tokens()

    user = db.get(User, user_id)
    if not user:
        raise AppError(404, "NOT_FOUND", "User no longer exists.")
    if not user.active:
        raise account_disabled()
    if changed_password_after(user.password_changed_at, claims.get("iat", 0)):
        raise session_expired("Password was changed recently. Please log in again.")
    return user


def restrict_to(*roles: Role):
    allowed = {r.value if isinstance(r, Role) else r for r in roles}

    def checker(user: User = Depends(get_current_user)) -> User:
        # Admin has access to everything
        if user.role == Role.admin.value:
            return user
        if user.role not in allowed:
            raise AppError(403, "ACCESS_DENIED", "You do not have permission to access this resource.")
        return user

    return checker


require_admin = restrict_to(Role.admin)


def require_password_confirm(
    password_confirm: Optional[str] = Body(None, alias="passwordConfirm", embed=True),
    user: User = Depends(get_current_user),
) -> User:
    if not password_confirm:
        raise AppError(400, "INVALID_ARGUMENTS", "Password confirmation is required.", {"passwordConfirm": password_confirm})
    if not verify_password(password_confirm, user.hashed_password):
        raise AppError(400, "INVALID_CREDENTIALS", "Password confirmation does not match.")
    return user
