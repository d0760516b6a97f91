"""Events listing endpoint."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query
from pydantic import BaseModel

from rootmarks.events.catalog import list_events
from rootmarks.season.service import today_utc

router = APIRouter(prefix="/api/v1", tags=["Events"])


class EventResponse(BaseModel):
    id: str
    day: date
    title: str
    location: str
    description: str | None = None


class EventListResponse(BaseModel):
    events: list[EventResponse]


@router.get("/events", response_model=EventListResponse)
async def get_events(upcoming: bool = Query(False)) -> EventListResponse:
    """All events, or only those from today (UTC) onwards."""
    events = list_events(today_utc() if upcoming else None)
    return EventListResponse(events=[EventResponse(**e) for e in events])
