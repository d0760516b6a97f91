"""Integration tests for gamification API endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from rootmarks.gamification.seed import BADGE_SEED_DATA


async def _finish(client: AsyncClient, pages: int) -> dict:
    book = (await client.post("/api/v1/books", json={"title": "Read me", "total_pages": pages})).json()
    return (await client.post(f"/api/v1/books/{book['id']}/finish")).json()


class TestBadgesEndpoints:
    """Test /badges endpoints (public)."""

    @pytest.mark.asyncio
    async def test_list_badges(self, client: AsyncClient):
        response = await client.get("/api/v1/badges")
        assert response.status_code == 200
        badges = response.json()["badges"]
        assert [b["slug"] for b in badges] == [b["slug"] for b in BADGE_SEED_DATA]

    @pytest.mark.asyncio
    async def test_unset_reward_reported_as_default(self, client: AsyncClient):
        badges = {b["slug"]: b for b in (await client.get("/api/v1/badges")).json()["badges"]}
        assert badges["pages_100"]["xp_reward"] == 50

    @pytest.mark.asyncio
    async def test_get_badge_by_slug(self, client: AsyncClient):
        response = await client.get("/api/v1/badges/books_10")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Library Builder"
        assert data["difficulty"] == "hard"
        assert data["requirement_value"] == 10
        assert data["total_earned"] == 0

    @pytest.mark.asyncio
    async def test_get_badge_not_found(self, client: AsyncClient):
        response = await client.get("/api/v1/badges/nonexistent")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_total_earned_counts(self, authed_client: AsyncClient):
        await _finish(authed_client, 300)
        data = (await authed_client.get("/api/v1/badges/first_book")).json()
        assert data["total_earned"] == 1


class TestLevelsEndpoint:
    @pytest.mark.asyncio
    async def test_list_levels(self, client: AsyncClient):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
        levels = response.json()["levels"]
        assert len(levels) == 6
        assert levels[0] == {"level": 1, "title": "Beginner Reader", "min_xp": 0, "max_xp": 100}
        assert levels[-1]["title"] == "Legend Reader"
        assert levels[-1]["min_xp"] == 5000


class TestAuthenticatedEndpoints:
    @pytest.mark.asyncio
    async def test_new_reader_xp(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/me/xp")
        assert response.status_code == 200
        data = response.json()
        assert data["total_xp"] == 0
        assert data["level"] == 1
        assert data["next_level_xp"] == 100
        assert data["is_max_level"] is False

    @pytest.mark.asyncio
    async def test_my_badges_after_finish(self, authed_client: AsyncClient):
        await _finish(authed_client, 300)

        response = await authed_client.get("/api/v1/users/me/badges")
        data = response.json()
        assert data["total_earned"] == 2
        assert data["total_available"] == len(BADGE_SEED_DATA)
        assert {b["slug"] for b in data["earned"]} == {"first_book", "pages_100"}

    @pytest.mark.asyncio
    async def test_xp_history(self, authed_client: AsyncClient):
        await _finish(authed_client, 300)

        response = await authed_client.get("/api/v1/users/me/xp/history", params={"per_page": 2})
        data = response.json()
        assert data["total"] == 3
        assert data["per_page"] == 2
        assert len(data["entries"]) == 2
        assert {e["source"] for e in data["entries"]} <= {"book", "badge"}

    @pytest.mark.asyncio
    async def test_xp_history_rejects_bad_page(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/me/xp/history", params={"page": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_summary(self, authed_client: AsyncClient):
        await _finish(authed_client, 300)

        data = (await authed_client.get("/api/v1/users/me/gamification")).json()
        assert data["xp"]["total_xp"] == 300
        assert data["xp"]["level_title"] == "Apprentice Reader"
        assert data["badges"] == {"earned": 2, "total": len(BADGE_SEED_DATA)}
        assert data["stats"] == {"total_books_read": 1, "total_pages_read": 300}

    @pytest.mark.asyncio
    async def test_check_awards_nothing_twice(self, authed_client: AsyncClient):
        await _finish(authed_client, 300)

        response = await authed_client.post("/api/v1/users/me/badges/check")
        assert response.status_code == 200
        assert response.json()["awarded"] == []

    @pytest.mark.asyncio
    async def test_check_on_fresh_reader(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/users/me/badges/check")
        assert response.status_code == 200
        assert response.json()["awarded"] == []
