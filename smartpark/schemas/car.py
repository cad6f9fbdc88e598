"""
Pydantic schemas for Car.
"""
from pydantic import Field, field_validator
from datetime import datetime
from typing import Optional
from smartpark.models.car import CarSize
from smartpark.schemas.base import CamelModel


class CarBase(CamelModel):
    """Base car schema with common fields."""
    car_type: str = Field(..., min_length=1)
    car_size: CarSize = CarSize.MEDIUM
    driver_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)


class CarCreate(CarBase):
    """Schema for creating a car."""
    plate_number: str = Field(..., min_length=1)

    @field_validator("plate_number")
    @classmethod
    def normalize_plate(cls, value: str) -> str:
        return value.strip().upper()


class CarUpdate(CamelModel):
    """Schema for updating a car. The plate number cannot change."""
    car_type: Optional[str] = Field(None, min_length=1)
    car_size: Optional[CarSize] = None
    driver_name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = Field(None, min_length=1)


class Car(CarBase):
    """Schema for car responses."""
    id: int
    plate_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
