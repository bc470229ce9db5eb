"""Integration tests for auth endpoints."""
import pytest


@pytest.mark.asyncio
class TestAuthRegister:
    """Tests for POST /auth/register endpoint."""

    async def test_register_success(self, app_client):
        response = await app_client.post(
            "/auth/register",
            json={
                "email": "newuser@example.com",
                "password": "securepassword123",
                "display_name": "New User",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "newuser@example.com"
        assert data["display_name"] == "New User"
        assert "id" in data
        assert "hashed_password" not in data

    async def test_register_duplicate_email(self, app_client):
        payload = {
            "email": "duplicate@example.com",
            "password": "password123",
            "display_name": "First User",
        }
        await app_client.post("/auth/register", json=payload)

        response = await app_client.post("/auth/register", json=payload)

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"].lower()

    async def test_register_invalid_email(self, app_client):
        response = await app_client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "password123", "display_name": "X"},
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestAuthLogin:
    """Tests for POST /auth/login and GET /auth/me."""

    async def test_login_and_me(self, app_client, auth_headers):
        response = await app_client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "test@example.com"

    async def test_login_wrong_password(self, app_client, auth_headers):
        response = await app_client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401

    async def test_me_requires_token(self, app_client):
        response = await app_client.get("/auth/me")
        assert response.status_code == 401

    async def test_me_rejects_bad_token(self, app_client):
        response = await app_client.get("/auth/me", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
