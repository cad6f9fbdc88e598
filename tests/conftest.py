import asyncio
import os
import tempfile

# Settings are read at import time
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{tempfile.mkdtemp()}/smartpark-startup.db"
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import smartpark.models  # noqa: F401
from smartpark.database import Base, get_db
from smartpark.main import app

API = "/api"


def make_client(db_path):
    """TestClient whose requests use a fresh SQLite database at db_path."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    session_maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    test_client.session_maker = session_maker
    return test_client


@pytest.fixture
def client(tmp_path):
    with make_client(tmp_path / "smartpark.db") as c:
        yield c
    app.dependency_overrides.clear()


def register(client, username="staff", password="secret123", email=None):
    response = client.post(f"{API}/auth/register", json={
        "username": username,
        "email": email or f"{username}@smartpark.rw",
        "password": password,
    })
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


def create_car(client, headers, plate="RAB123A", **overrides):
    body = {
        "plateNumber": plate,
        "carType": "Toyota Corolla",
        "carSize": "Medium",
        "driverName": "Jean Mugabo",
        "phoneNumber": "0788000000",
    }
    body.update(overrides)
    response = client.post(f"{API}/cars", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_package(client, headers, number="PK001", name="Premium Wash", price=10000, **overrides):
    body = {
        "packageNumber": number,
        "packageName": name,
        "packageDescription": "Exterior, interior and wax",
        "packagePrice": price,
    }
    body.update(overrides)
    response = client.post(f"{API}/packages", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_service(client, headers, car_id, package_id, service_date="2025-01-10", status="pending"):
    response = client.post(f"{API}/service-packages", json={
        "carId": car_id,
        "packageId": package_id,
        "serviceDate": service_date,
        "status": status,
    }, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_payment(client, headers, service_id, amount=None, method="cash", payment_date="2025-01-10"):
    body = {"servicePackageId": service_id, "paymentMethod": method, "paymentDate": payment_date}
    if amount is not None:
        body["amountPaid"] = amount
    return client.post(f"{API}/payments", json=body, headers=headers)
