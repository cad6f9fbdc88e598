"""
HTTP client for the SmartPark API.

Each REST resource is wrapped as a small object with typed methods; responses
are parsed into the shared schemas. The bearer token comes from the token
store on every call, and a 401 from any call clears the store.
"""
import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Type, Union

import pydantic
import requests
from pydantic import BaseModel

from smartpark.client.errors import ApiError, AuthenticationError, ValidationError
from smartpark.client.storage import MemoryTokenStore
from smartpark.schemas.car import Car, CarCreate, CarUpdate
from smartpark.schemas.package import Package, PackageCreate, PackageUpdate
from smartpark.schemas.payment import Bill, Payment, PaymentCreate
from smartpark.schemas.report import DailyReport, Summary
from smartpark.schemas.service_package import (
    ServicePackage,
    ServicePackageCreate,
    ServicePackageUpdate,
)
from smartpark.schemas.user import User

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"

Payload = Union[BaseModel, Dict[str, Any]]


def _to_body(payload: Payload, schema: Type[BaseModel], partial: bool = False) -> Dict[str, Any]:
    """Validate a payload against a request schema and serialize it for the wire."""
    try:
        model = payload if isinstance(payload, schema) else schema.model_validate(
            payload.model_dump() if isinstance(payload, BaseModel) else payload
        )
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}" if field else first["msg"]) from exc
    return model.model_dump(by_alias=True, mode="json", exclude_unset=partial)


class ApiClient:
    """
    Entry point to the API.

    Args:
        base_url: API root, including the ``/api`` prefix
        store: token store holding the bearer token and user
        http: object with a requests-style ``request`` method, shared by every
            thread; when omitted each thread gets its own ``requests.Session``
        timeout: seconds per request, or None for the transport default
        on_unauthorized: called after a 401 has cleared the store
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store=None,
        http=None,
        timeout: Optional[float] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.store = store if store is not None else MemoryTokenStore()
        self._http = http
        self._local = threading.local()
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized

        self.auth = AuthResource(self)
        self.cars = CrudResource(self, "/cars", Car, CarCreate, CarUpdate)
        self.packages = CrudResource(self, "/packages", Package, PackageCreate, PackageUpdate)
        self.service_packages = ServicePackagesResource(self)
        self.payments = PaymentsResource(self)
        self.reports = ReportsResource(self)

    @property
    def http(self):
        """Transport for the calling thread."""
        if self._http is not None:
            return self._http
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        teardown_on_401: bool = True,
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body, or raise ApiError."""
        headers = {"Content-Type": "application/json"}
        if self.store.token:
            headers["Authorization"] = f"Bearer {self.store.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.http.request(
                method,
                self.base_url + path,
                json=json,
                params=params or None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.error("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.status_code == 401:
            message = body.get("message") or "Authentication required"
            if teardown_on_401:
                log.warning("%s %s unauthorized, clearing session", method, path)
                self.store.clear()
                if self.on_unauthorized is not None:
                    self.on_unauthorized()
            raise AuthenticationError(message)

        if response.status_code >= 400:
            message = body.get("message") or f"Request failed with status {response.status_code}"
            log.error("%s %s failed (%s): %s", method, path, response.status_code, message)
            raise ApiError(message, response.status_code)

        return body


class AuthResource:
    """``/auth``: register, login, logout, current user."""

    def __init__(self, client: ApiClient):
        self.client = client

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        body = self.client.request(
            "POST", "/auth/register",
            json={"username": username, "email": email, "password": password},
            teardown_on_401=False,
        )
        return body["data"]

    def login(self, username: str, password: str) -> Dict[str, Any]:
        body = self.client.request(
            "POST", "/auth/login",
            json={"username": username, "password": password},
            teardown_on_401=False,
        )
        return body["data"]

    def logout(self) -> None:
        self.client.request("POST", "/auth/logout", teardown_on_401=False)

    def me(self) -> User:
        return User.model_validate(self.client.request("GET", "/auth/me")["data"])


class CrudResource:
    """A collection supporting list, get, create, update and delete."""

    def __init__(self, client: ApiClient, path: str, model, create_schema, update_schema):
        self.client = client
        self.path = path
        self.model = model
        self.create_schema = create_schema
        self.update_schema = update_schema

    def _parse_list(self, body: Dict[str, Any]) -> List[Any]:
        return [self.model.model_validate(item) for item in body.get("data") or []]

    def list(self) -> List[Any]:
        return self._parse_list(self.client.request("GET", self.path))

    def get(self, record_id: int):
        body = self.client.request("GET", f"{self.path}/{record_id}")
        return self.model.model_validate(body["data"])

    def create(self, payload: Payload):
        body = self.client.request("POST", self.path, json=_to_body(payload, self.create_schema))
        return self.model.model_validate(body["data"])

    def update(self, record_id: int, payload: Payload):
        body = self.client.request(
            "PUT", f"{self.path}/{record_id}",
            json=_to_body(payload, self.update_schema, partial=True),
        )
        return self.model.model_validate(body["data"])

    def delete(self, record_id: int) -> str:
        return self.client.request("DELETE", f"{self.path}/{record_id}").get("message", "")


class ServicePackagesResource(CrudResource):
    """``/service-packages``, plus the unpaid query."""

    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/service-packages",
            ServicePackage, ServicePackageCreate, ServicePackageUpdate,
        )

    def unpaid(self) -> List[ServicePackage]:
        return self._parse_list(self.client.request("GET", f"{self.path}/unpaid"))

    def update_status(self, record_id: int, status) -> ServicePackage:
        return self.update(record_id, {"status": status})


class PaymentsResource:
    """``/payments``: list, get, create and bills."""

    path = "/payments"

    def __init__(self, client: ApiClient):
        self.client = client

    def list(self) -> List[Payment]:
        body = self.client.request("GET", self.path)
        return [Payment.model_validate(item) for item in body.get("data") or []]

    def get(self, payment_id: int) -> Payment:
        return Payment.model_validate(self.client.request("GET", f"{self.path}/{payment_id}")["data"])

    def create(self, payload: Payload) -> Payment:
        body = self.client.request("POST", self.path, json=_to_body(payload, PaymentCreate))
        return Payment.model_validate(body["data"])

    def bill(self, service_id: int) -> Optional[Bill]:
        """The bill for a service record, or None when the record does not exist."""
        try:
            body = self.client.request("GET", f"{self.path}/bill/{service_id}")
        except ApiError as exc:
            if exc.not_found:
                return None
            raise
        return Bill.model_validate(body["data"])


class ReportsResource:
    """``/reports``: daily and summary."""

    def __init__(self, client: ApiClient):
        self.client = client

    def daily(self, report_date: Optional[date] = None) -> DailyReport:
        params = {"date": report_date.isoformat() if report_date else None}
        return DailyReport.model_validate(self.client.request("GET", "/reports/daily", params=params))

    def summary(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Summary:
        params = {
            "startDate": start_date.isoformat() if start_date else None,
            "endDate": end_date.isoformat() if end_date else None,
        }
        body = self.client.request("GET", "/reports/summary", params=params)
        return Summary.model_validate(body["data"])
