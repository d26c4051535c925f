"""
Pydantic schemas for Car listings.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional
from carmarket.models.car import CarCondition
from carmarket.schemas.user import UserReference, UserSummary


class CarImage(BaseModel):
    """A hosted image reference."""
    url: str = Field(..., min_length=1)
    public_id: str = Field(..., min_length=1)


class CarCreate(BaseModel):
    """Schema for creating a listing."""
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int = Field(..., ge=1886, le=2100)
    price: float = Field(..., ge=0)
    mileage: int = Field(..., ge=0)
    condition: CarCondition
    description: Optional[str] = None
    images: List[CarImage] = Field(..., min_length=1)
    engine: Optional[str] = None
    transmission: Optional[str] = None
    color: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class Car(BaseModel):
    """Schema for listing responses."""
    id: int
    user_id: int = Field(..., serialization_alias="user")
    make: str
    model: str
    year: int
    price: float
    mileage: int
    condition: CarCondition
    description: Optional[str] = None
    images: List[CarImage] = []
    engine: Optional[str] = None
    transmission: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)


class CarWithOwner(Car):
    """Listing with the owner embedded in place of the owner id."""
    user_id: int = Field(..., exclude=True)
    user: UserSummary


class CarWithSeller(CarWithOwner):
    """Listing with the seller's name and email, for administrators."""
    user: UserReference


class CarSummary(BaseModel):
    """Minimal listing projection embedded in bookings."""
    id: int
    make: str
    model: str
    year: int

    model_config = ConfigDict(from_attributes=True)


class SellerContact(BaseModel):
    """Contact details of a listing's seller."""
    name: str
    email: str
    phone_number: Optional[str] = Field(None, serialization_alias="phoneNumber")
    address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ImageAnalysis(BaseModel):
    """Search criteria extracted from a photo. Missing fields mean no filter."""
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
