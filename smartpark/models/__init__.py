"""
SQLAlchemy database models.
"""
from smartpark.models.user import User, UserRole, RevokedToken
from smartpark.models.car import Car, CarSize
from smartpark.models.package import Package
from smartpark.models.service_package import ServicePackage, ServiceStatus
from smartpark.models.payment import Payment, PaymentMethod

__all__ = [
    "User", "UserRole", "RevokedToken",
    "Car", "CarSize",
    "Package",
    "ServicePackage", "ServiceStatus",
    "Payment", "PaymentMethod",
]
