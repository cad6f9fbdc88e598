import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from conftest import API, register
from smartpark.models.user import RevokedToken


def test_register_returns_token_and_user(client):
    data = register(client, "alice")

    assert data["username"] == "alice"
    assert data["email"] == "alice@smartpark.rw"
    assert data["role"] == "staff"
    assert data["token"]
    assert "password" not in data
    assert "hashedPassword" not in data


def test_register_rejects_duplicate_username(client):
    register(client, "alice")
    response = client.post(f"{API}/auth/register", json={
        "username": "alice", "email": "other@smartpark.rw", "password": "secret123",
    })
    assert response.status_code == 400
    assert response.json() == {"message": "Username already registered"}


def test_register_validates_fields(client):
    response = client.post(f"{API}/auth/register", json={
        "username": "bob", "email": "not-an-email", "password": "secret123",
    })
    assert response.status_code == 400
    assert "email" in response.json()["message"]

    response = client.post(f"{API}/auth/register", json={
        "username": "bob", "email": "bob@smartpark.rw", "password": "123",
    })
    assert response.status_code == 400
    assert "password" in response.json()["message"]


def test_login_and_me(client):
    register(client, "alice", password="secret123")

    response = client.post(f"{API}/auth/login", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "alice"


def test_login_with_wrong_password(client):
    register(client, "alice", password="secret123")

    response = client.post(f"{API}/auth/login", json={"username": "alice", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid username or password"}


def test_resources_require_token(client):
    for path in ("/cars", "/packages", "/service-packages", "/payments", "/reports/summary"):
        response = client.get(f"{API}{path}")
        assert response.status_code == 401, path
        assert response.json()["message"]


def test_garbage_token_is_rejected(client):
    response = client.get(f"{API}/cars", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid authentication token"}


def test_logout_revokes_token(client, auth_headers):
    assert client.get(f"{API}/cars", headers=auth_headers).status_code == 200

    response = client.post(f"{API}/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    response = client.get(f"{API}/cars", headers=auth_headers)
    assert response.status_code == 401
    assert response.json() == {"message": "Session has been logged out"}


def revoked_ids(client):
    async def query():
        async with client.session_maker() as db:
            result = await db.execute(select(RevokedToken.jti).order_by(RevokedToken.jti))
            return list(result.scalars().all())

    return asyncio.run(query())


def test_logout_forgets_expired_revocations(client, auth_headers):
    now = datetime.now(timezone.utc)

    async def seed():
        async with client.session_maker() as db:
            db.add_all([
                RevokedToken(jti="expired-token", expires_at=now - timedelta(minutes=5)),
                RevokedToken(jti="live-token", expires_at=now + timedelta(hours=1)),
            ])
            await db.commit()

    asyncio.run(seed())

    response = client.post(f"{API}/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    remaining = revoked_ids(client)
    assert "expired-token" not in remaining
    assert "live-token" in remaining
    assert len(remaining) == 2
