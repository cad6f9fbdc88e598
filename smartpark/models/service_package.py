"""
Service record model for database.
A service record books one package for one car on a given date.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartpark.database import Base
import enum


class ServiceStatus(str, enum.Enum):
    """Service status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    PAID = "paid"


class ServicePackage(Base):
    """Service record database model."""

    __tablename__ = "service_packages"

    id = Column(Integer, primary_key=True, index=True)
    record_number = Column(String, unique=True, nullable=True, index=True)
    car_id = Column(Integer, ForeignKey("cars.id"), nullable=False)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    service_date = Column(Date, nullable=False)
    status = Column(
        SQLEnum(ServiceStatus, values_callable=lambda e: [m.value for m in e]),
        default=ServiceStatus.PENDING,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    car = relationship("Car", back_populates="service_packages", lazy="selectin")
    package = relationship("Package", back_populates="service_packages", lazy="selectin")
    payment = relationship("Payment", back_populates="service_package", uselist=False)
