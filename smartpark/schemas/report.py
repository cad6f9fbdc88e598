"""
Pydantic schemas for reports.
"""
from datetime import date
from typing import List, Optional
from smartpark.models.payment import PaymentMethod
from smartpark.schemas.base import CamelModel, Money


class DailyReportEntry(CamelModel):
    """One payment line of the daily report."""
    payment_number: Optional[str] = None
    plate_number: Optional[str] = None
    package_name: Optional[str] = None
    package_description: Optional[str] = None
    amount_paid: Money
    payment_method: PaymentMethod
    payment_date: date


class DailyReport(CamelModel):
    """Payments made on one date and their total."""
    report_date: date
    data: List[DailyReportEntry]
    count: int
    total: Money


class PackageRevenue(CamelModel):
    """Revenue earned by one package."""
    package_name: str
    total_revenue: Money
    count: int


class Summary(CamelModel):
    """Overall counts and revenue."""
    total_cars: int
    total_packages: int
    total_services: int
    total_payments: int
    total_revenue: Money
    revenue_by_package: List[PackageRevenue]
