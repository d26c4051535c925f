"""
User profile routes.
"""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from carmarket.auth import clear_auth_cookie, get_current_user, hash_password
from carmarket.config import Settings, get_settings
from carmarket.database import get_db
from carmarket.exceptions import ValidationError
from carmarket.models.car import Car
from carmarket.models.test_drive import TestDrive
from carmarket.models.user import User
from carmarket.schemas.user import User as UserSchema, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserSchema)
async def get_profile(current_user: User = Depends(get_current_user)):
    """
    Get the caller's profile.
    """
    return current_user


@router.put("/profile", response_model=UserSchema)
async def update_profile(
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update the caller's profile.
    """
    # Update only provided fields
    update_data = user_update.model_dump(exclude_unset=True)

    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
        if update_data["email"] != current_user.email:
            result = await db.execute(select(User).where(User.email == update_data["email"]))
            if result.scalar_one_or_none():
                raise ValidationError("Email already registered")

    password = update_data.pop("password", None)
    if password:
        current_user.hashed_password = hash_password(password)

    for field, value in update_data.items():
        if value is None and field in ("name", "email"):
            continue
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)

    return current_user


@router.delete("/profile")
async def delete_profile(
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(get_current_user),
):
    """
    Delete the caller along with their listings and bookings.
    """
    user_id = current_user.id
    own_cars = select(Car.id).where(Car.user_id == user_id)

    await db.execute(
        delete(TestDrive).where((TestDrive.user_id == user_id) | TestDrive.car_id.in_(own_cars))
    )
    await db.execute(delete(Car).where(Car.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()

    clear_auth_cookie(response, settings)
    logger.info("User %s deleted their account", user_id)
    return {"success": True, "message": "User removed"}
