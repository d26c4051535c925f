"""
Authentication: password hashing, JWT credentials and the request dependencies
that resolve them to the calling user.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carmarket.config import Settings, get_settings
from carmarket.database import get_db
from carmarket.exceptions import Unauthorized
from carmarket.models.user import User, UserRole
from carmarket.schemas.user import Identity

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a password against its stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: int, settings: Settings) -> str:
    """Sign a token that identifies the user until it expires."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def set_auth_cookie(response: Response, token: str, settings: Settings):
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.access_token_expire_minutes * 60,
    )


def clear_auth_cookie(response: Response, settings: Settings):
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def extract_credential(request: Request, settings: Settings) -> Optional[str]:
    """Return the bearer token from the Authorization header, else the auth cookie."""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()
    return request.cookies.get(settings.cookie_name)


async def authenticate(credential: Optional[str], db: AsyncSession, settings: Settings) -> User:
    """
    Resolve a credential to a stored user.

    Raises Unauthorized when the credential is missing, malformed, expired,
    or names a user that no longer exists.
    """
    if not credential:
        raise Unauthorized("Not authorized, no token")

    try:
        payload = jwt.decode(credential, settings.secret_key, algorithms=[settings.algorithm])
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        logger.info("Rejected invalid credential")
        raise Unauthorized("Not authorized, token failed")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise Unauthorized("Not authorized, user not found")

    return user


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Dependency returning the authenticated user."""
    return await authenticate(extract_credential(request, settings), db, settings)


async def get_identity(current_user: User = Depends(get_current_user)) -> Identity:
    """Dependency returning the caller as a typed Identity."""
    return Identity.model_validate(current_user)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    """Dependency that only admits administrators."""
    if identity.role != UserRole.ADMIN:
        raise Unauthorized("Not authorized as an admin")
    return identity
