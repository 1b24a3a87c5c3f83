"""Integration tests for registration, login and profile routes."""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def registration_data(**overrides) -> dict:
    unique_id = uuid.uuid4().hex[:8]
    data = {
        "email": f"member_{unique_id}@example.com",
        "username": f"member_{unique_id}",
        "password": "secret-password",
        "first_name": "Test",
        "last_name": "Member",
    }
    data.update(overrides)
    return data


class TestRegister:
    async def test_register_returns_token_and_beginner_user(self, async_client: AsyncClient):
        data = registration_data()

        response = await async_client.post("/api/auth/register", json=data)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["access_token"]
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == data["username"]
        assert body["user"]["role"] == "BEGINNER"
        assert "password_hash" not in body["user"]

    async def test_duplicate_email_conflicts(self, async_client: AsyncClient):
        data = registration_data()
        await async_client.post("/api/auth/register", json=data)

        response = await async_client.post(
            "/api/auth/register", json=registration_data(email=data["email"])
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "EMAIL_EXISTS"

    async def test_duplicate_username_conflicts(self, async_client: AsyncClient):
        data = registration_data()
        await async_client.post("/api/auth/register", json=data)

        response = await async_client.post(
            "/api/auth/register", json=registration_data(username=data["username"])
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "USERNAME_EXISTS"

    async def test_short_password_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/register", json=registration_data(password="123")
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "VALIDATION_ERROR"

    async def test_invalid_username_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/register", json=registration_data(username="no spaces allowed")
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_malformed_email_is_unprocessable(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/register", json=registration_data(email="not-an-email")
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestLogin:
    async def test_login_success(self, async_client: AsyncClient, beginner):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": beginner.email, "password": "TestPassword123!"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["access_token"]
        assert body["user"]["id"] == beginner.id
        assert body["user"]["last_login_at"] is not None

    async def test_wrong_password(self, async_client: AsyncClient, beginner):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": beginner.email, "password": "wrong-password"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid credentials"

    async def test_unknown_email(self, async_client: AsyncClient, setup_test_database):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "TestPassword123!"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_inactive_account_cannot_login(self, async_client: AsyncClient, make_user):
        user = await make_user(is_active=False)

        response = await async_client.post(
            "/api/auth/login",
            json={"email": user.email, "password": "TestPassword123!"},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error_code"] == "ACCOUNT_INACTIVE"

    async def test_token_from_login_authenticates(self, async_client: AsyncClient, beginner):
        login = await async_client.post(
            "/api/auth/login",
            json={"email": beginner.email, "password": "TestPassword123!"},
        )
        token = login.json()["access_token"]

        response = await async_client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == beginner.email


class TestProfile:
    async def test_profile_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/profile")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Authentication required"

    async def test_invalid_token_is_unauthenticated(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/auth/profile", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_deactivated_user_token_is_forbidden(
        self, async_client: AsyncClient, make_user, auth_headers
    ):
        user = await make_user(is_active=False)

        response = await async_client.get("/api/auth/profile", headers=auth_headers(user))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_update_profile(self, async_client: AsyncClient, beginner, beginner_headers):
        response = await async_client.patch(
            "/api/auth/profile",
            json={"bio": "Hello forum", "first_name": "Ada"},
            headers=beginner_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        user = response.json()["user"]
        assert user["bio"] == "Hello forum"
        assert user["first_name"] == "Ada"
        assert user["username"] == beginner.username

    async def test_change_password(self, async_client: AsyncClient, beginner, beginner_headers):
        response = await async_client.post(
            "/api/auth/change-password",
            json={"current_password": "TestPassword123!", "new_password": "brand-new-secret"},
            headers=beginner_headers,
        )
        assert response.status_code == status.HTTP_200_OK

        login = await async_client.post(
            "/api/auth/login",
            json={"email": beginner.email, "password": "brand-new-secret"},
        )
        assert login.status_code == status.HTTP_200_OK

    async def test_change_password_wrong_current(self, async_client: AsyncClient, beginner_headers):
        response = await async_client.post(
            "/api/auth/change-password",
            json={"current_password": "nope-nope", "new_password": "brand-new-secret"},
            headers=beginner_headers,
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Current password is incorrect"


class TestPermissions:
    async def test_beginner_capabilities(self, async_client: AsyncClient, beginner_headers):
        response = await async_client.get("/api/auth/permissions", headers=beginner_headers)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["role"] == "BEGINNER"
        assert not any(body["permissions"].values())

    async def test_admin_capabilities(self, async_client: AsyncClient, admin_headers):
        response = await async_client.get("/api/auth/permissions", headers=admin_headers)

        assert all(response.json()["permissions"].values())
