"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from rootmarks.gamification.level_thresholds import compute_level


# --- Badge ---


class BadgeDefinitionResponse(BaseModel):
    slug: str
    name: str
    description: str
    icon: str
    requirement_type: str
    requirement_value: int
    difficulty: str
    xp_reward: int
    total_earned: int = 0


class EarnedBadgeResponse(BaseModel):
    slug: str
    name: str
    icon: str
    difficulty: str
    earned_at: datetime


class UserBadgesResponse(BaseModel):
    earned: list[EarnedBadgeResponse]
    total_available: int
    total_earned: int


class AllBadgesResponse(BaseModel):
    badges: list[BadgeDefinitionResponse]


class BadgeCheckResponse(BaseModel):
    awarded: list[BadgeDefinitionResponse]


# --- XP ---


class XPResponse(BaseModel):
    total_xp: int
    level: int
    level_title: str
    xp_into_level: int
    xp_for_level: int
    progress_percent: float
    next_level: int | None = None
    next_title: str | None = None
    next_level_xp: int | None = None
    xp_to_next_level: int | None = None
    is_max_level: bool = False

    @classmethod
    def from_xp(cls, total_xp: int) -> XPResponse:
        level_info = compute_level(total_xp)
        return cls(
            total_xp=total_xp,
            level=level_info["level"],
            level_title=level_info["title"],
            xp_into_level=level_info["xp_into_level"],
            xp_for_level=level_info["xp_for_level"],
            progress_percent=level_info["progress_percent"],
            next_level=level_info["next_level"],
            next_title=level_info["next_title"],
            next_level_xp=level_info["next_level_xp"],
            xp_to_next_level=level_info["xp_to_next_level"],
            is_max_level=level_info["is_max_level"],
        )


class XPHistoryEntry(BaseModel):
    amount: int
    source: str
    source_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class XPHistoryResponse(BaseModel):
    entries: list[XPHistoryEntry]
    total: int
    page: int
    per_page: int


# --- Gamification Summary ---


class GamificationSummaryResponse(BaseModel):
    xp: XPResponse
    badges: dict  # {earned: int, total: int}
    stats: dict  # {total_books_read: int, total_pages_read: int}


# --- Levels ---


class LevelEntry(BaseModel):
    level: int
    title: str
    min_xp: int
    max_xp: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]
