"""Request/response schemas for book endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class BookCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    author: str | None = Field(None, max_length=256)
    total_pages: int = Field(..., ge=1)
    cover_url: str | None = None


class ProgressUpdateRequest(BaseModel):
    pages_read: int = Field(..., ge=0)


class RatingUpdateRequest(BaseModel):
    rating: int = Field(..., ge=0, le=5)


class BookResponse(BaseModel):
    id: int
    title: str
    author: str
    total_pages: int
    pages_read: int
    progress: int
    rating: int
    status: str
    cover_url: str | None = None
    created_at: datetime
    finished_at: datetime | None = None


class BookListResponse(BaseModel):
    books: list[BookResponse]
    total: int


class AwardedBadgeResponse(BaseModel):
    slug: str
    name: str
    description: str
    icon: str
    difficulty: str
    xp_reward: int


class FinishBookResponse(BaseModel):
    book: BookResponse
    xp_gained: int
    total_xp: int
    level_before: int
    level_after: int
    level_title: str
    leveled_up: bool
    new_badges: list[AwardedBadgeResponse]


class BookSearchResult(BaseModel):
    id: str
    title: str
    author: str
    page_count: int | None = None
    cover_url: str | None = None
    description: str | None = None
    published_date: str | None = None


class BookSearchResponse(BaseModel):
    results: list[BookSearchResult]
