"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import Field
from datetime import datetime
from trackpay.app.schemas.base import CamelModel


class UserSignup(CamelModel):
    """
    Schema for user signup.

    Used by POST /api/auth/signup endpoint.
    """
    username: str = Field(..., min_length=1, max_length=100, description="Unique username")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")


class UserLogin(CamelModel):
    """
    Schema for user login.

    Used by POST /api/auth/login endpoint.
    """
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class UserPublic(CamelModel):
    """Public user identity embedded in token responses."""
    id: int
    username: str


class TokenResponse(CamelModel):
    """
    Schema for JWT token response.

    Returned by successful signup/login operations.
    """
    token: str = Field(..., description="JWT access token")
    user: UserPublic


class UserResponse(CamelModel):
    """
    Schema for user information response.

    Used by GET /api/auth/me endpoint.
    """
    id: int
    username: str
    created_at: datetime
