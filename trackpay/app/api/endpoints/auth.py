"""
Authentication API endpoints.

Provides signup, login, and current-user endpoints for the mobile client.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from trackpay.app.db.session import get_db
from trackpay.app.models.user import User
from trackpay.app.schemas.auth import UserSignup, UserLogin, TokenResponse, UserPublic, UserResponse
from trackpay.app.core.security import get_password_hash, verify_password
from trackpay.app.core.jwt import create_user_token
from trackpay.app.core.dependencies import get_current_user
from trackpay.app.core.exceptions import AuthenticationError, ConflictError, ResourceNotFoundError, ValidationError

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger("trackpay.auth")


def _token_response(user: User) -> TokenResponse:
    access_token = create_user_token(user)
    return TokenResponse(token=access_token, user=UserPublic(id=user.id, username=user.username))


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and return a token.

    Fails with 400 if the username is taken or the password is shorter
    than 6 characters.
    """
    username = user_data.username.strip()
    if not username:
        raise ValidationError("Username and password are required", field="username")

    result = await db.execute(select(User).where(User.username == username))
    if result.scalar_one_or_none():
        raise ConflictError("Username already exists")

    new_user = User(
        username=username,
        hashed_password=get_password_hash(user_data.password)
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("User %s signed up (id=%s)", new_user.username, new_user.id)
    return _token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Unknown usernames and wrong passwords get the same 401 response.
    """
    result = await db.execute(
        select(User).where(User.username == credentials.username.strip())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning("Failed login for username %r", credentials.username)
        raise AuthenticationError("Invalid username or password")

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user information.

    Requires valid JWT token in Authorization header.

    Raises:
        404: If user not found in database
    """
    user_id = current_user.get("user_id")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundError("User", user_id)

    return UserResponse.model_validate(user)
