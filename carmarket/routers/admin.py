"""
Admin dashboard routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from typing import List

from carmarket.auth import require_admin
from carmarket.database import get_db
from carmarket.models.car import Car
from carmarket.models.test_drive import TestDrive
from carmarket.models.user import User
from carmarket.schemas.admin import Analytics
from carmarket.schemas.car import CarWithSeller
from carmarket.schemas.test_drive import TestDriveDetail
from carmarket.schemas.user import User as UserSchema

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

RECENT_TEST_DRIVES = 5


def _test_drives_with_relations():
    return select(TestDrive).options(selectinload(TestDrive.user), selectinload(TestDrive.car))


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@router.get("/analytics", response_model=Analytics)
async def get_analytics(db: AsyncSession = Depends(get_db)):
    """
    Platform totals and the latest bookings.
    """
    result = await db.execute(
        _test_drives_with_relations()
        .order_by(TestDrive.created_at.desc(), TestDrive.id.desc())
        .limit(RECENT_TEST_DRIVES)
    )
    recent = result.scalars().all()

    return Analytics(
        total_users=await _count(db, User),
        total_car_listings=await _count(db, Car),
        total_test_drives=await _count(db, TestDrive),
        recent_test_drives=[TestDriveDetail.model_validate(td) for td in recent],
    )


@router.get("/cars", response_model=List[CarWithSeller])
async def get_all_cars(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Car).options(selectinload(Car.user)).order_by(Car.id))
    return result.scalars().all()


@router.get("/users", response_model=List[UserSchema])
async def get_all_users(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()


@router.get("/testdrives", response_model=List[TestDriveDetail])
async def get_all_test_drives(db: AsyncSession = Depends(get_db)):
    result = await db.execute(_test_drives_with_relations().order_by(TestDrive.id))
    return result.scalars().all()
