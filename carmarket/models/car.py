"""
Car listing model for database.
"""
from sqlalchemy import Column, Integer, String, Float, Text, JSON, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from carmarket.database import Base
import enum


class CarCondition(str, enum.Enum):
    """Listing condition enumeration."""
    CERTIFIED_PRE_OWNED = "Certified Pre-Owned"
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class Car(Base):
    """Car listing database model."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    make = Column(String, nullable=False, index=True)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    mileage = Column(Integer, nullable=False)
    condition = Column(
        SQLEnum(CarCondition, name="car_condition", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    description = Column(Text, nullable=True)
    # Ordered list of {"url": ..., "public_id": ...}
    images = Column(JSON, nullable=False, default=list)
    engine = Column(String, nullable=True)
    transmission = Column(String, nullable=True)
    color = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="cars")
    test_drives = relationship("TestDrive", back_populates="car", cascade="all, delete-orphan")
