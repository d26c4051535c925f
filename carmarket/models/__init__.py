"""
SQLAlchemy database models.
"""
from carmarket.models.user import User, UserRole
from carmarket.models.car import Car, CarCondition
from carmarket.models.test_drive import TestDrive, TestDriveStatus

__all__ = ["User", "UserRole", "Car", "CarCondition", "TestDrive", "TestDriveStatus"]
