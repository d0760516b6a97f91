"""Seasonal theme endpoint."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query
from pydantic import BaseModel

from rootmarks.season.service import Season, current_season, today_utc

router = APIRouter(prefix="/api/v1", tags=["Season"])


class SeasonResponse(BaseModel):
    day: date
    season: Season


@router.get("/season", response_model=SeasonResponse)
async def get_season(on: date | None = Query(None)) -> SeasonResponse:
    """Theme for a date (default: today, UTC)."""
    day = on or today_utc()
    return SeasonResponse(day=day, season=current_season(day))
