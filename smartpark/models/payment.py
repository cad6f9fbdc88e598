"""
Payment model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartpark.database import Base
import enum


class PaymentMethod(str, enum.Enum):
    """Payment method enumeration."""
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    CARD = "card"


class Payment(Base):
    """Payment database model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_number = Column(String, unique=True, nullable=True, index=True)
    # One payment per service record
    service_package_id = Column(
        Integer, ForeignKey("service_packages.id"), unique=True, nullable=False
    )
    amount_paid = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(
        SQLEnum(PaymentMethod, values_callable=lambda e: [m.value for m in e]),
        default=PaymentMethod.CASH,
        nullable=False,
    )
    payment_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    service_package = relationship("ServicePackage", back_populates="payment", lazy="selectin")
