"""
Pydantic schemas for wash Package.
"""
from pydantic import Field
from datetime import datetime
from typing import Optional
from smartpark.schemas.base import CamelModel, Money


class PackageBase(CamelModel):
    """Base package schema with common fields."""
    package_name: str = Field(..., min_length=1)
    package_description: Optional[str] = None
    package_price: Money = Field(..., ge=0, max_digits=12, decimal_places=2)


class PackageCreate(PackageBase):
    """Schema for creating a package."""
    package_number: str = Field(..., min_length=1)


class PackageUpdate(CamelModel):
    """Schema for updating a package. The package number cannot change."""
    package_name: Optional[str] = Field(None, min_length=1)
    package_description: Optional[str] = None
    package_price: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)


class Package(PackageBase):
    """Schema for package responses."""
    id: int
    package_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
