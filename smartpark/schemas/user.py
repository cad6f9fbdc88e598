"""
Pydantic schemas for User and Authentication.
"""
from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional
from smartpark.models.user import UserRole
from smartpark.schemas.base import CamelModel


class UserBase(CamelModel):
    """Base user schema with common fields."""
    username: str = Field(..., min_length=3)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for registering a user."""
    password: str = Field(..., min_length=6)


class User(UserBase):
    """Schema for user responses."""
    id: int
    role: UserRole = UserRole.STAFF
    is_active: bool = True
    created_at: Optional[datetime] = None


class AuthenticatedUser(User):
    """User returned by login and register, carrying the bearer token."""
    token: str


class LoginRequest(CamelModel):
    """Schema for login request."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
