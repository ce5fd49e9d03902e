# tests/routes/test_auth_routes.py
"""Tests for the /auth endpoints."""

import pytest
from httpx import AsyncClient

SIGNUP = {"username": "ada", "email": "ada@example.com", "password": "secret"}


class TestSignupAndLogin:
    """Registration and session endpoints."""

    @pytest.mark.asyncio
    async def test_signup_first_user_is_admin(self, client: AsyncClient) -> None:
        response = await client.post("/auth/signup", json=SIGNUP)

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "admin"
        assert body["apiKey"]
        assert body["requestCount"] == 0
        assert "password" not in body
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_signup_duplicate_email(self, client: AsyncClient) -> None:
        await client.post("/auth/signup", json=SIGNUP)

        response = await client.post("/auth/signup", json={**SIGNUP, "email": "ADA@example.com"})

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_signup_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post("/auth/signup", json={**SIGNUP, "email": "nope"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation failed"
        assert response.json()["errors"][0]["field"] == "email"

    @pytest.mark.asyncio
    async def test_login_and_me(self, client: AsyncClient) -> None:
        await client.post("/auth/signup", json=SIGNUP)
        await client.post("/auth/logout")

        assert (await client.get("/auth/me")).status_code == 401

        response = await client.post(
            "/auth/login",
            json={"email": "ada@example.com", "password": "secret"},
        )
        assert response.status_code == 200

        me = await client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["username"] == "ada"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient) -> None:
        await client.post("/auth/signup", json=SIGNUP)

        response = await client.post(
            "/auth/login",
            json={"email": "ada@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials. Please try again."

    @pytest.mark.asyncio
    async def test_logout_without_session(self, client: AsyncClient) -> None:
        assert (await client.post("/auth/logout")).status_code == 204

    @pytest.mark.asyncio
    async def test_me_without_session(self, client: AsyncClient) -> None:
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "No active session"


class TestApiKeyEndpoint:
    """Self-service API key generation."""

    @pytest.mark.asyncio
    async def test_generate_api_key(self, client: AsyncClient) -> None:
        await client.post("/auth/signup", json=SIGNUP)
        await client.post(
            "/auth/signup",
            json={"username": "grace", "email": "grace@example.com", "password": "hopper"},
        )

        response = await client.post("/auth/api-key")

        assert response.status_code == 200
        api_key = response.json()["apiKey"]
        assert (await client.get("/auth/me")).json()["apiKey"] == api_key

    @pytest.mark.asyncio
    async def test_generate_api_key_requires_session(self, client: AsyncClient) -> None:
        assert (await client.post("/auth/api-key")).status_code == 401
