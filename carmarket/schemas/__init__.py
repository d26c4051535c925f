"""
Pydantic schemas for request/response validation.
"""
from carmarket.schemas.user import (
    UserCreate, UserUpdate, LoginRequest, User, UserSummary, UserReference, AuthResponse, Identity,
)
from carmarket.schemas.car import (
    CarImage, CarCreate, Car, CarWithOwner, CarWithSeller, CarSummary, SellerContact, ImageAnalysis,
)
from carmarket.schemas.test_drive import (
    TestDriveCreate, TestDriveStatusUpdate, TestDrive, TestDriveWithCar, TestDriveDetail,
)
from carmarket.schemas.admin import Analytics

__all__ = [
    "UserCreate", "UserUpdate", "LoginRequest", "User", "UserSummary", "UserReference", "AuthResponse", "Identity",
    "CarImage", "CarCreate", "Car", "CarWithOwner", "CarWithSeller", "CarSummary", "SellerContact", "ImageAnalysis",
    "TestDriveCreate", "TestDriveStatusUpdate", "TestDrive", "TestDriveWithCar", "TestDriveDetail",
    "Analytics",
]
