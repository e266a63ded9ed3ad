"""
JWT access tokens for the mobile client.

Tokens carry the username as ``sub`` and the numeric ``user_id`` that every
ledger query is scoped to.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from trackpay.app.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign ``data`` with an ``exp`` claim.

    Expiry defaults to ``settings.access_token_expire_minutes``.
    """
    to_encode = dict(data)
    lifetime = expires_delta if expires_delta is not None else timedelta(
        minutes=settings.access_token_expire_minutes
    )
    to_encode["exp"] = datetime.now(timezone.utc) + lifetime

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_user_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue the session token for a signed-up or logged-in user."""
    return create_access_token(
        {"sub": user.username, "user_id": user.id},
        expires_delta=expires_delta
    )


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the payload of a valid, unexpired token, else None."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
