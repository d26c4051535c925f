"""
Pydantic schemas for User and Authentication.
"""
from pydantic import BaseModel, EmailStr, ConfigDict, Field, StringConstraints
from datetime import datetime
from typing import Annotated, Optional
from carmarket.models.user import UserRole

# Passwords are kept verbatim; only profile text is trimmed
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class UserCreate(BaseModel):
    """Schema for registering a user. The role is never taken from the request."""
    name: Name
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone_number: Optional[Trimmed] = Field(None, alias="phoneNumber")
    address: Optional[Trimmed] = None

    model_config = ConfigDict(populate_by_name=True)


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""
    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    phone_number: Optional[Trimmed] = Field(None, alias="phoneNumber")
    address: Optional[Trimmed] = None

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: str


class User(BaseModel):
    """Schema for user responses."""
    id: int
    name: str
    email: str
    role: UserRole
    phone_number: Optional[str] = Field(None, serialization_alias="phoneNumber")
    address: Optional[str] = None
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Minimal user projection embedded in other records."""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserReference(UserSummary):
    """User projection with the email, for admin review."""
    email: str


class AuthResponse(BaseModel):
    """Schema for register/login responses."""
    success: bool = True
    message: str
    access_token: str
    token_type: str = "bearer"
    user: User


class Identity(BaseModel):
    """The authenticated caller, resolved from a credential."""
    id: int
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
