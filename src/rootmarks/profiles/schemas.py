"""Request/response schemas for profile endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from rootmarks.gamification.schemas import XPResponse


class ProfileUpdateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)


class AvatarUpdateRequest(BaseModel):
    avatar_id: str = Field(..., min_length=1, max_length=32)


class ProfileResponse(BaseModel):
    id: str
    username: str | None = None
    email: str | None = None
    avatar_id: str
    avatar_emoji: str
    total_books_read: int
    total_pages_read: int
    experience_points: int
    level: XPResponse
    created_at: datetime
    updated_at: datetime


class AvatarResponse(BaseModel):
    id: str
    emoji: str
    name: str


class AvatarListResponse(BaseModel):
    avatars: list[AvatarResponse]
