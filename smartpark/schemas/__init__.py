"""
Pydantic schemas for request/response validation.
"""
from smartpark.schemas.base import CamelModel, ListResponse, ItemResponse, MessageResponse
from smartpark.schemas.car import CarBase, CarCreate, CarUpdate, Car
from smartpark.schemas.package import PackageBase, PackageCreate, PackageUpdate, Package
from smartpark.schemas.service_package import ServicePackageCreate, ServicePackageUpdate, ServicePackage
from smartpark.schemas.payment import PaymentCreate, Payment, BillPayment, Bill
from smartpark.schemas.report import DailyReportEntry, DailyReport, PackageRevenue, Summary
from smartpark.schemas.user import UserBase, UserCreate, User, AuthenticatedUser, LoginRequest

__all__ = [
    "CamelModel", "ListResponse", "ItemResponse", "MessageResponse",
    "CarBase", "CarCreate", "CarUpdate", "Car",
    "PackageBase", "PackageCreate", "PackageUpdate", "Package",
    "ServicePackageCreate", "ServicePackageUpdate", "ServicePackage",
    "PaymentCreate", "Payment", "BillPayment", "Bill",
    "DailyReportEntry", "DailyReport", "PackageRevenue", "Summary",
    "UserBase", "UserCreate", "User", "AuthenticatedUser", "LoginRequest",
]
