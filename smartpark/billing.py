"""
Billing rules shared by the API and the client.

Everything here works on the wire schemas (``smartpark.schemas``) and never
touches the database, so the same functions serve the routers and the client
screens.
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from smartpark.models.service_package import ServiceStatus
from smartpark.schemas.base import CENT
from smartpark.schemas.car import Car
from smartpark.schemas.package import Package
from smartpark.schemas.payment import Bill, BillPayment, Payment
from smartpark.schemas.report import DailyReport, DailyReportEntry, PackageRevenue, Summary
from smartpark.schemas.service_package import ServicePackage


PAID = "Paid"
PENDING = "Pending"

UNKNOWN_PACKAGE = "Unknown package"

ZERO = Decimal("0")


class InvalidStatusTransition(Exception):
    """Raised when a service record may not move to the requested status."""

    def __init__(self, current: ServiceStatus, requested: ServiceStatus):
        self.current = ServiceStatus(current)
        self.requested = ServiceStatus(requested)
        super().__init__(
            f"Cannot change status from '{self.current.value}' to '{self.requested.value}'"
        )


# ==================== STATUS TRANSITIONS ====================

def check_transition(current: ServiceStatus, requested: ServiceStatus, strict: bool = True) -> None:
    """
    Validate a status change.

    Staff may move a record freely between pending, in-progress and completed,
    and may mark it paid. Once paid the record is settled; with ``strict`` off
    every change is accepted.
    """
    current = ServiceStatus(current)
    requested = ServiceStatus(requested)
    if not strict or current == requested:
        return
    if current == ServiceStatus.PAID:
        raise InvalidStatusTransition(current, requested)


def update_service_status(service, new_status: ServiceStatus, strict: bool = True):
    """
    Overwrite the status of a service record after checking the transition.
    Works on ORM rows and schemas alike; payments are not touched.
    """
    new_status = ServiceStatus(new_status)
    check_transition(service.status, new_status, strict=strict)
    service.status = new_status
    return service


# ==================== UNPAID SERVICES ====================

def paid_service_ids(payments: Iterable[Payment]) -> set:
    """Ids of service records already referenced by a payment."""
    ids = set()
    for payment in payments:
        if payment.service_package is not None:
            ids.add(payment.service_package.id)
        elif payment.service_package_id is not None:
            ids.add(payment.service_package_id)
    return ids


def unpaid_services(
    services: Iterable[ServicePackage], payments: Iterable[Payment]
) -> List[ServicePackage]:
    """
    Service records eligible for a new payment, in their original order:
    no payment references them and their status is not paid.
    """
    paid_ids = paid_service_ids(payments)
    return [
        service for service in services
        if service.id not in paid_ids and service.status != ServiceStatus.PAID
    ]


# ==================== BILL ====================

def compose_bill(
    service: ServicePackage,
    payment: Optional[Payment],
    company_location: str,
) -> Bill:
    """
    Build the printable bill for a service record.

    The bill is dated on the payment when there is one, otherwise on the
    service date, so it only changes when the underlying records do.
    """
    if service.car is None or service.package is None:
        raise ValueError(f"Service record {service.id} is missing its car or package")

    if payment is not None:
        bill_payment = BillPayment(
            status=PAID,
            payment_number=payment.payment_number,
            amount_paid=payment.amount_paid,
            payment_method=payment.payment_method,
            payment_date=payment.payment_date,
        )
        bill_date = payment.payment_date
    else:
        bill_payment = BillPayment(
            status=PENDING,
            amount_due=service.package.package_price,
        )
        bill_date = service.service_date

    return Bill(
        car=service.car,
        package=service.package,
        service=service,
        payment=bill_payment,
        company_location=company_location,
        bill_date=bill_date,
    )


# ==================== REPORTS ====================

def _report_entry(payment: Payment) -> DailyReportEntry:
    service = payment.service_package
    car: Optional[Car] = service.car if service else None
    package: Optional[Package] = service.package if service else None
    return DailyReportEntry(
        payment_number=payment.payment_number,
        plate_number=car.plate_number if car else None,
        package_name=package.package_name if package else None,
        package_description=package.package_description if package else None,
        amount_paid=payment.amount_paid,
        payment_method=payment.payment_method,
        payment_date=payment.payment_date,
    )


def daily_report(payments: Iterable[Payment], report_date: date) -> DailyReport:
    """Payments made on ``report_date`` with their total. Other dates are dropped."""
    entries = [
        _report_entry(payment) for payment in payments
        if payment.payment_date == report_date
    ]
    return DailyReport(
        report_date=report_date,
        data=entries,
        count=len(entries),
        total=sum((entry.amount_paid for entry in entries), ZERO),
    )


def revenue_by_package(payments: Iterable[Payment]) -> List[PackageRevenue]:
    """Sum and count of payments per package name, highest revenue first."""
    totals = OrderedDict()
    for payment in payments:
        service = payment.service_package
        if service is not None and service.package is not None:
            name = service.package.package_name
        else:
            name = UNKNOWN_PACKAGE
        revenue, count = totals.get(name, (ZERO, 0))
        totals[name] = (revenue + payment.amount_paid, count + 1)

    rows = [
        PackageRevenue(package_name=name, total_revenue=revenue, count=count)
        for name, (revenue, count) in totals.items()
    ]
    rows.sort(key=lambda row: row.total_revenue, reverse=True)
    return rows


def in_range(value: date, start: Optional[date], end: Optional[date]) -> bool:
    """Inclusive date range check; a missing bound is open."""
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def summary_report(
    total_cars: int,
    total_packages: int,
    services: Iterable[ServicePackage],
    payments: Iterable[Payment],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Summary:
    """
    Overall counts and revenue. The optional range filters services by service
    date and payments by payment date; car and package counts are always full.
    """
    services = [s for s in services if in_range(s.service_date, start, end)]
    payments = [p for p in payments if in_range(p.payment_date, start, end)]
    by_package = revenue_by_package(payments)
    return Summary(
        total_cars=total_cars,
        total_packages=total_packages,
        total_services=len(services),
        total_payments=len(payments),
        total_revenue=sum((row.total_revenue for row in by_package), ZERO),
        revenue_by_package=by_package,
    )


def amount_matches_price(amount_paid, package_price) -> bool:
    """Whether a payment covers exactly the package price, to the cent."""
    return _cents(amount_paid) == _cents(package_price)


def _cents(amount) -> Decimal:
    return Decimal(str(amount)).quantize(CENT)
