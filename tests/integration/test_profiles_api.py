"""Integration tests for profile and avatar endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestProfile:
    @pytest.mark.asyncio
    async def test_profile_created_on_first_request(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/me")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "reader-0001"
        assert data["email"] == "reader@example.com"
        assert data["avatar_id"] == "default"
        assert data["experience_points"] == 0
        assert data["level"]["level"] == 1
        assert data["level"]["level_title"] == "Beginner Reader"

    @pytest.mark.asyncio
    async def test_update_username(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/v1/users/me", json={"username": "  Bilbo  "})
        assert response.status_code == 200
        assert response.json()["username"] == "Bilbo"

        again = await authed_client.get("/api/v1/users/me")
        assert again.json()["username"] == "Bilbo"

    @pytest.mark.asyncio
    async def test_blank_username_rejected(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/v1/users/me", json={"username": "   "})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_username_too_long(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/v1/users/me", json={"username": "x" * 65})
        assert response.status_code == 422


class TestAvatars:
    @pytest.mark.asyncio
    async def test_list_avatars(self, client: AsyncClient):
        response = await client.get("/api/v1/avatars")
        assert response.status_code == 200
        avatars = response.json()["avatars"]
        assert len(avatars) == 16
        assert avatars[0]["id"] == "default"

    @pytest.mark.asyncio
    async def test_select_avatar(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/users/me/avatar", json={"avatar_id": "owl"})
        assert response.status_code == 200
        assert response.json()["avatar_id"] == "owl"

    @pytest.mark.asyncio
    async def test_unknown_avatar_rejected(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/users/me/avatar", json={"avatar_id": "velociraptor"})
        assert response.status_code == 400
        assert "Unknown avatar" in response.json()["detail"]

        profile = (await authed_client.get("/api/v1/users/me")).json()
        assert profile["avatar_id"] == "default"
