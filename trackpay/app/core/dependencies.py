"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from trackpay.app.core.exceptions import AuthenticationError
from trackpay.app.core.jwt import decode_access_token
from trackpay.app.db.session import get_db
from trackpay.app.models.user import User

# HTTP Bearer security scheme (missing header is reported as 401 below, not 403)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    1. Requires an ``Authorization: Bearer <token>`` header
    2. Validates JWT token signature and expiry
    3. Verifies the user still exists in the database

    Args:
        credentials: HTTP Bearer token from request header
        db: Database session for the user lookup

    Returns:
        Decoded token payload containing user information (sub, user_id)

    Raises:
        AuthenticationError: 401 if authentication fails for any reason
    """
    if credentials is None:
        raise AuthenticationError("No authentication token provided")

    # 1. Decode and validate JWT
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    # 2. Real-time database check
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise AuthenticationError("User not found")

    return payload
