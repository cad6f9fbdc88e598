"""
Car model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartpark.database import Base
import enum


class CarSize(str, enum.Enum):
    """Car size enumeration."""
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    SUV = "SUV"
    TRUCK = "Truck"


class Car(Base):
    """Car database model."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    plate_number = Column(String, unique=True, nullable=False, index=True)
    car_type = Column(String, nullable=False)
    car_size = Column(
        SQLEnum(CarSize, values_callable=lambda e: [m.value for m in e]),
        default=CarSize.MEDIUM,
        nullable=False,
    )
    driver_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    service_packages = relationship("ServicePackage", back_populates="car")
