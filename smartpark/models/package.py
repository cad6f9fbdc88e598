"""
Wash package model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartpark.database import Base


class Package(Base):
    """Package database model."""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    package_number = Column(String, unique=True, nullable=False, index=True)
    package_name = Column(String, nullable=False)
    package_description = Column(String, nullable=True)
    package_price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    service_packages = relationship("ServicePackage", back_populates="package")
