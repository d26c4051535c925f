"""
Authentication routes.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carmarket.auth import (
    clear_auth_cookie, create_access_token, get_current_user, hash_password, set_auth_cookie,
    verify_password,
)
from carmarket.config import Settings, get_settings
from carmarket.database import get_db
from carmarket.exceptions import Unauthorized, ValidationError
from carmarket.models.user import User, UserRole
from carmarket.schemas.user import AuthResponse, LoginRequest, User as UserSchema, UserCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new user and sign them in.
    """
    email = payload.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ValidationError("User already exists")

    user = User(
        name=payload.name,
        email=email,
        hashed_password=hash_password(payload.password),
        role=UserRole.USER,
        phone_number=payload.phone_number,
        address=payload.address,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    token = create_access_token(user.id, settings)
    set_auth_cookie(response, token, settings)
    logger.info("User %s registered", user.id)

    return AuthResponse(
        message="User registered successfully",
        access_token=token,
        user=UserSchema.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Check credentials and set the auth cookie.
    """
    result = await db.execute(select(User).where(User.email == payload.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.hashed_password):
        raise Unauthorized("Invalid email or password")

    token = create_access_token(user.id, settings)
    set_auth_cookie(response, token, settings)

    return AuthResponse(
        message="Login successful",
        access_token=token,
        user=UserSchema.model_validate(user),
    )


@router.get("/logout")
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Clear the auth cookie."""
    clear_auth_cookie(response, settings)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/profile", response_model=UserSchema)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user
