from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from app.core.config import settings


# Configure bcrypt with explicit backend to avoid compatibility issues
password_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

ACCESS = "access"
REFRESH = "refresh"


class TokenExpired(Exception):
    """The token signature is valid but its ``exp`` has passed."""


class TokenInvalid(Exception):
    """The token is malformed, badly signed or not yet valid."""


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return password_context.verify(password, hashed_password)


def _secret_for(token_type: str) -> str:
    return settings.access_secret if token_type == ACCESS else settings.refresh_secret


def _minutes_for(token_type: str) -> int:
    if token_type == ACCESS:
        return settings.access_token_expire_minutes
    return settings.refresh_token_expire_minutes


def create_token(user_id: int, token_type: str, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    minutes = _minutes_for(token_type) if expires_minutes is None else expires_minutes
    payload: dict[str, Any] = {
        "id": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int) -> str:
    return create_token(user_id, ACCESS)


def create_refresh_token(user_id: int) -> str:
    return create_token(user_id, REFRESH)


def decode_token(token: str, token_type: str) -> dict[str, Any]:
    """Verify ``token`` with the secret of ``token_type``.

    Raises ``TokenExpired`` for an expired but otherwise valid token and
    ``TokenInvalid`` for anything else PyJWT rejects.
    """
    try:
        return jwt.decode(token, _secret_for(token_type), algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.PyJWTError as exc:
        raise TokenInvalid(str(exc)) from exc


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def changed_password_after(password_changed_at: Optional[datetime], issued_at: int) -> bool:
    """True when the password was changed after a token issued at ``issued_at`` (epoch seconds)."""
    if not password_changed_at:
        return False
    changed_ts = int(_as_utc(password_changed_at).timestamp())
    return issued_at < changed_ts


def password_change_timestamp() -> datetime:
    # One second in the past so tokens issued right after the change stay valid
    return datetime.now(timezone.utc) - timedelta(seconds=1)
