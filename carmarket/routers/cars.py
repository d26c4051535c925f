"""
Car listing routes.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from carmarket.auth import get_identity
from carmarket.database import get_db
from carmarket.exceptions import NotFound, ServerError, ValidationError
from carmarket.models.car import Car
from carmarket.schemas.car import Car as CarSchema, CarCreate, CarWithOwner, SellerContact
from carmarket.schemas.user import Identity
from carmarket.services.ai import CarVisionClient, get_ai_client
from carmarket.services.search import find_similar

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("", response_model=List[CarWithOwner])
async def get_cars(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all listings with their sellers.
    """
    result = await db.execute(
        select(Car).options(selectinload(Car.user)).order_by(Car.id).offset(skip).limit(limit)
    )
    return result.scalars().all()


@router.post("", response_model=CarSchema, status_code=status.HTTP_201_CREATED)
async def create_car(
    car: CarCreate,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_identity),
    ai_client: Optional[CarVisionClient] = Depends(get_ai_client),
):
    """
    Create a listing owned by the caller. Without a description, one is
    written by the AI model when it is configured.
    """
    car_data = car.model_dump()
    if not car_data.get("description") and ai_client is not None:
        car_data["description"] = await ai_client.generate_description(
            {**car_data, "condition": car.condition.value}
        )

    db_car = Car(user_id=identity.id, **car_data)
    db.add(db_car)
    await db.commit()
    await db.refresh(db_car)

    logger.info("Car %s listed by user %s", db_car.id, identity.id)
    return db_car


@router.post("/search-by-image", response_model=List[CarSchema])
async def search_by_image(
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    ai_client: Optional[CarVisionClient] = Depends(get_ai_client),
):
    """
    Find listings resembling the car in an uploaded photo.
    """
    content = await image.read() if image is not None else b""
    if not content:
        raise ValidationError("Please upload an image file.")
    if ai_client is None:
        raise ServerError("Image search is not configured")

    criteria = await ai_client.analyze_image(content, image.content_type or "image/jpeg")
    logger.info("Image search criteria: %s", criteria.model_dump(exclude_none=True))

    cars = await find_similar(db, criteria)
    if not cars:
        raise NotFound("No similar cars found. Please try a different image or search manually.")
    return cars


@router.get("/{car_id}", response_model=CarSchema)
async def get_car(car_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific listing by ID.
    """
    result = await db.execute(select(Car).where(Car.id == car_id))
    car = result.scalar_one_or_none()

    if not car:
        raise NotFound("Car not found")

    return car


@router.get("/{car_id}/contact", response_model=SellerContact)
async def get_seller_contact(
    car_id: int,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """
    Get the seller's contact details for a listing.
    """
    result = await db.execute(select(Car).options(selectinload(Car.user)).where(Car.id == car_id))
    car = result.scalar_one_or_none()

    if not car or not car.user:
        raise NotFound("Car or seller not found")

    return car.user
