"""
Pydantic schemas for service records.
"""
from pydantic import Field
from datetime import date, datetime
from typing import Optional
from smartpark.models.service_package import ServiceStatus
from smartpark.schemas.base import CamelModel
from smartpark.schemas.car import Car
from smartpark.schemas.package import Package


class ServicePackageCreate(CamelModel):
    """Schema for booking a package for a car."""
    car_id: int
    package_id: int
    service_date: date = Field(default_factory=date.today)
    status: ServiceStatus = ServiceStatus.PENDING


class ServicePackageUpdate(CamelModel):
    """
    Schema for updating a service record.
    Car and package references are fixed at creation, so only these fields move.
    """
    service_date: Optional[date] = None
    status: Optional[ServiceStatus] = None


class ServicePackage(CamelModel):
    """Schema for service record responses."""
    id: int
    record_number: Optional[str] = None
    car_id: int
    package_id: int
    service_date: date
    status: ServiceStatus
    car: Optional[Car] = None
    package: Optional[Package] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
