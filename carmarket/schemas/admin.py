"""
Pydantic schemas for the admin dashboard.
"""
from pydantic import BaseModel, Field
from typing import List
from carmarket.schemas.test_drive import TestDriveDetail


class Analytics(BaseModel):
    """Platform totals and the latest bookings."""
    total_users: int = Field(..., serialization_alias="totalUsers")
    total_car_listings: int = Field(..., serialization_alias="totalCarListings")
    total_test_drives: int = Field(..., serialization_alias="totalTestDrives")
    recent_test_drives: List[TestDriveDetail] = Field(..., serialization_alias="recentTestDrives")
