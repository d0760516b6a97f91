"""Request/response schemas for plant scan endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PlantScanRequest(BaseModel):
    image_data: str = Field(..., min_length=1)


class PlantScanResponse(BaseModel):
    id: int
    image_url: str
    health_status: str
    tips: str
    created_at: datetime


class PlantScanListResponse(BaseModel):
    scans: list[PlantScanResponse]
