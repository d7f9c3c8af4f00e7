"""JWT access tokens.

Tokens are issued elsewhere (login is not part of this service); here they are
only minted for tooling/tests and decoded to identify the caller.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.core.config import settings


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": str(user_id), "exp": expire, "type": "access"}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def user_id_from_token(token: str) -> int | None:
    """Integer user id from a valid access token, else None."""
    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        return None
    sub = str(payload.get("sub") or "")
    return int(sub) if sub.isdigit() else None
