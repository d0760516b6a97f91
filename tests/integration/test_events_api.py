"""Integration tests for /api/v1/events."""

from datetime import date

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_events(client: AsyncClient) -> None:
    response = await client.get("/api/v1/events")
    assert response.status_code == 200
    event = response.json()["events"][0]
    assert event["day"] == "2025-01-27"
    assert event["location"] == "AGS"


@pytest.mark.asyncio
async def test_upcoming_excludes_past_events(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr("rootmarks.events.router.today_utc", lambda: date(2025, 2, 1))
    response = await client.get("/api/v1/events", params={"upcoming": "true"})
    assert response.status_code == 200
    assert response.json()["events"] == []
