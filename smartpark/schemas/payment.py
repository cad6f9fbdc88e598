"""
Pydantic schemas for Payment and Bill.
"""
from pydantic import Field
from datetime import date, datetime
from typing import Optional
from smartpark.models.payment import PaymentMethod
from smartpark.schemas.base import CamelModel, Money
from smartpark.schemas.car import Car
from smartpark.schemas.package import Package
from smartpark.schemas.service_package import ServicePackage


class PaymentCreate(CamelModel):
    """
    Schema for recording a payment.
    When amount_paid is omitted the package price is used.
    """
    service_package_id: int
    amount_paid: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: date = Field(default_factory=date.today)


class Payment(CamelModel):
    """Schema for payment responses."""
    id: int
    payment_number: Optional[str] = None
    service_package_id: int
    amount_paid: Money
    payment_method: PaymentMethod
    payment_date: date
    service_package: Optional[ServicePackage] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BillPayment(CamelModel):
    """Payment section of a bill: settled details, or the amount still due."""
    status: str
    payment_number: Optional[str] = None
    amount_paid: Optional[Money] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None
    amount_due: Optional[Money] = None


class Bill(CamelModel):
    """Printable bill composed from a car, package, service record and payment."""
    car: Car
    package: Package
    service: ServicePackage
    payment: BillPayment
    company_location: str
    bill_date: date
