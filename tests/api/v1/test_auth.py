from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from jose import jwt

from fintrack.api.deps import get_user_repo
from fintrack.core.config import settings
from fintrack.core.security import hash_password
from fintrack.main import app
from fintrack.models.user import UserInDB


def _user(password="SecurePassword123"):
    now = datetime.now(timezone.utc)
    return UserInDB(
        _id=ObjectId(),
        name="John Doe",
        email="john@example.com",
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def users():
    repo = MagicMock()
    repo.get_user_by_email = AsyncMock(return_value=None)
    repo.create_user = AsyncMock()
    app.dependency_overrides[get_user_repo] = lambda: repo
    yield repo
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anonymous_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_signup_returns_token(anonymous_client, users):
    user = _user()
    users.create_user.return_value = user

    response = await anonymous_client.post("/api/v1/auth/signup", json={
        "name": "John Doe", "email": "john@example.com", "password": "SecurePassword123"
    })

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == str(user.id)
    payload = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == str(user.id)


@pytest.mark.asyncio
async def test_signup_with_taken_email(anonymous_client, users):
    users.get_user_by_email.return_value = _user()

    response = await anonymous_client.post("/api/v1/auth/signup", json={
        "name": "John Doe", "email": "john@example.com", "password": "SecurePassword123"
    })

    assert response.status_code == 400
    users.create_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_login(anonymous_client, users):
    users.get_user_by_email.return_value = _user()

    ok = await anonymous_client.post("/api/v1/auth/login", json={
        "email": "john@example.com", "password": "SecurePassword123"
    })
    wrong = await anonymous_client.post("/api/v1/auth/login", json={
        "email": "john@example.com", "password": "nope-nope"
    })

    assert ok.status_code == 200
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_protected_route_requires_token(anonymous_client):
    response = await anonymous_client.get("/api/v1/balances/")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_me(client, alice):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 200
    assert response.json()["email"] == alice.email
