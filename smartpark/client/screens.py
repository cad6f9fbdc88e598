"""
Screen loaders.

Each loader takes the ``AuthSession``, fetches what its screen shows in
parallel and returns it in one piece. If any fetch fails the whole load fails.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional

from smartpark import billing
from smartpark.client.errors import AuthenticationError
from smartpark.client.session import AuthSession
from smartpark.schemas.car import Car
from smartpark.schemas.package import Package
from smartpark.schemas.payment import Payment
from smartpark.schemas.service_package import ServicePackage

log = logging.getLogger(__name__)

RECENT_PAYMENTS = 5


def load_all(*calls: Callable[[], Any]) -> List[Any]:
    """
    Run independent fetches concurrently and return their results in order.
    The first failure is raised once every call has finished.
    """
    if not calls:
        return []
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(call) for call in calls]
        return [future.result() for future in futures]


def _lookup(record: Any, dotted: str) -> Optional[Any]:
    value = record
    for name in dotted.split("."):
        if value is None:
            return None
        value = value.get(name) if isinstance(value, dict) else getattr(value, name, None)
    return value


def filter_records(records: Iterable[Any], term: str, *fields: str) -> List[Any]:
    """
    Case-insensitive substring search over the given (dotted) fields.
    An empty term keeps every record.
    """
    records = list(records)
    term = (term or "").strip().lower()
    if not term:
        return records
    matches = []
    for record in records:
        for name in fields:
            value = _lookup(record, name)
            if value is not None and term in str(value).lower():
                matches.append(record)
                break
    return matches


def _require_login(session: AuthSession) -> None:
    if not session.is_authenticated:
        raise AuthenticationError("Please log in to continue")


def _load(session: AuthSession, screen: str, *calls: Callable[[], Any]) -> List[Any]:
    _require_login(session)
    try:
        return load_all(*calls)
    except Exception as exc:
        log.error("Failed to load %s: %s", screen, exc)
        raise


@dataclass
class ServiceScreen:
    services: List[ServicePackage]
    cars: List[Car]
    packages: List[Package]


@dataclass
class PaymentScreen:
    payments: List[Payment]
    unpaid_services: List[ServicePackage]
    total_revenue: Decimal


@dataclass
class Dashboard:
    total_cars: int
    total_packages: int
    total_services: int
    total_payments: int
    total_revenue: Decimal
    recent_payments: List[Payment] = field(default_factory=list)


def load_cars(session: AuthSession) -> List[Car]:
    return _load(session, "cars", session.api.cars.list)[0]


def load_packages(session: AuthSession) -> List[Package]:
    return _load(session, "packages", session.api.packages.list)[0]


def load_service_screen(session: AuthSession) -> ServiceScreen:
    """Service records plus the cars and packages offered in the booking form."""
    api = session.api
    services, cars, packages = _load(
        session, "service records",
        api.service_packages.list, api.cars.list, api.packages.list,
    )
    return ServiceScreen(services=services, cars=cars, packages=packages)


def load_payment_screen(session: AuthSession) -> PaymentScreen:
    """Payments, and the services that can still be paid for."""
    api = session.api
    payments, services = _load(
        session, "payments", api.payments.list, api.service_packages.list,
    )
    return PaymentScreen(
        payments=payments,
        unpaid_services=billing.unpaid_services(services, payments),
        total_revenue=sum((p.amount_paid for p in payments), Decimal("0")),
    )


def load_dashboard(session: AuthSession) -> Dashboard:
    api = session.api
    cars, packages, services, payments, summary = _load(
        session, "dashboard",
        api.cars.list, api.packages.list, api.service_packages.list,
        api.payments.list, api.reports.summary,
    )
    return Dashboard(
        total_cars=len(cars),
        total_packages=len(packages),
        total_services=len(services),
        total_payments=len(payments),
        total_revenue=summary.total_revenue,
        recent_payments=payments[:RECENT_PAYMENTS],
    )


def prefill_amount(service: ServicePackage) -> Optional[Decimal]:
    """Amount to propose for a payment: the booked package's price."""
    if service.package is None:
        return None
    return service.package.package_price
