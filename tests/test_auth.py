"""Tests for staff authentication and role checks"""

import pytest
from httpx import AsyncClient
from uuid import uuid4

from app.api.auth import create_refresh_token, get_password_hash
from app.models.user import User, UserRole


@pytest.mark.asyncio
async def test_login_and_me(client: AsyncClient, test_staff_user):
    """Form login returns tokens that identify the user"""
    response = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "waiterpass123"},
    )
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["refresh_token"]

    me = await client.get(
        "/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )
    assert me.status_code == 200
    assert me.json()["email"] == "waiter@example.com"
    assert me.json()["role"] == "staff"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_staff_user):
    response = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "wrong"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_disabled_user_is_refused(client: AsyncClient, session_factory):
    async with session_factory() as db:
        db.add(User(
            id=str(uuid4()),
            email="former@example.com",
            hashed_password=get_password_hash("formerpass"),
            full_name="Former Waiter",
            role=UserRole.STAFF,
            is_active=False,
        ))
        await db.commit()

    response = await client.post(
        "/auth/login",
        data={"username": "former@example.com", "password": "formerpass"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, test_admin_user):
    login = await client.post(
        "/auth/login",
        data={"username": "admin@example.com", "password": "adminpass123"},
    )
    refresh_token = login.json()["refresh_token"]

    response = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_token_not_accepted_as_access(client: AsyncClient, test_admin_user):
    token = create_refresh_token(test_admin_user)
    response = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_refresh(client: AsyncClient, test_staff_user):
    login = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "waiterpass123"},
    )
    tokens = login.json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = await client.post("/auth/logout", headers=headers)
    assert response.status_code == 200

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token(client: AsyncClient):
    response = await client.get("/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_admin_outranks_staff():
    admin = User(role=UserRole.ADMIN)
    staff = User(role=UserRole.STAFF)

    assert admin.has_permission(UserRole.STAFF)
    assert admin.has_permission(UserRole.ADMIN)
    assert staff.has_permission(UserRole.STAFF)
    assert not staff.has_permission(UserRole.ADMIN)
