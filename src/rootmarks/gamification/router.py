"""Gamification API endpoints: badges, levels, XP."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.auth.dependencies import get_current_profile
from rootmarks.database import get_session
from rootmarks.db.models import BadgeDefinition, Profile
from rootmarks.dependencies import get_redis_dep
from rootmarks.gamification.badge_service import (
    badge_xp_reward,
    count_earners,
    get_badge_by_slug,
    list_badges,
    list_earned_badges,
)
from rootmarks.gamification.level_thresholds import LEVEL_THRESHOLDS
from rootmarks.gamification.schemas import (
    AllBadgesResponse,
    AllLevelsResponse,
    BadgeCheckResponse,
    BadgeDefinitionResponse,
    EarnedBadgeResponse,
    GamificationSummaryResponse,
    LevelEntry,
    UserBadgesResponse,
    XPHistoryEntry,
    XPHistoryResponse,
    XPResponse,
)
from rootmarks.gamification.trigger_engine import TriggerEngine
from rootmarks.gamification.xp_service import get_xp_history
from rootmarks.profiles.service import get_profile

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


def _badge_response(badge: BadgeDefinition, total_earned: int = 0) -> BadgeDefinitionResponse:
    return BadgeDefinitionResponse(
        slug=badge.slug,
        name=badge.name,
        description=badge.description,
        icon=badge.icon,
        requirement_type=badge.requirement_type,
        requirement_value=badge.requirement_value,
        difficulty=badge.difficulty,
        xp_reward=badge_xp_reward(badge),
        total_earned=total_earned,
    )


# ── Public endpoints ──


@router.get("/badges", response_model=AllBadgesResponse)
async def get_badges(db: AsyncSession = Depends(get_session)):
    """Get all badge definitions with earner counts."""
    badges = await list_badges(db)
    earners = await count_earners(db)
    return AllBadgesResponse(
        badges=[_badge_response(b, earners.get(b.id, 0)) for b in badges]
    )


@router.get("/badges/{slug}", response_model=BadgeDefinitionResponse)
async def get_badge(slug: str, db: AsyncSession = Depends(get_session)):
    """Get single badge detail."""
    badge = await get_badge_by_slug(db, slug)
    if badge is None:
        raise HTTPException(status_code=404, detail="Badge not found")
    earners = await count_earners(db)
    return _badge_response(badge, earners.get(badge.id, 0))


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get all level definitions."""
    return AllLevelsResponse(
        levels=[
            LevelEntry(
                level=t["level"],
                title=t["title"],
                min_xp=t["min_xp"],
                max_xp=t["max_xp"],
            )
            for t in LEVEL_THRESHOLDS
        ]
    )


# ── Authenticated endpoints ──


@router.get("/users/me/badges", response_model=UserBadgesResponse)
async def get_my_badges(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Get current reader's earned badges, newest first."""
    earned = await list_earned_badges(db, profile.id)
    catalog = await list_badges(db)

    return UserBadgesResponse(
        earned=[
            EarnedBadgeResponse(
                slug=ub.badge.slug,
                name=ub.badge.name,
                icon=ub.badge.icon,
                difficulty=ub.badge.difficulty,
                earned_at=ub.earned_at,
            )
            for ub in earned
        ],
        total_available=len(catalog),
        total_earned=len(earned),
    )


@router.post("/users/me/badges/check", response_model=BadgeCheckResponse)
async def check_my_badges(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Re-run badge evaluation against current statistics."""
    locked = await get_profile(db, profile.id, for_update=True)
    awarded = await TriggerEngine(db, redis).evaluate(locked or profile)
    await db.commit()
    return BadgeCheckResponse(awarded=[_badge_response(b) for b in awarded])


@router.get("/users/me/xp", response_model=XPResponse)
async def get_my_xp(profile: Profile = Depends(get_current_profile)):
    """Get current reader's XP and level."""
    return XPResponse.from_xp(profile.experience_points)


@router.get("/users/me/xp/history", response_model=XPHistoryResponse)
async def get_my_xp_history(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Get XP ledger history (paginated)."""
    entries, total = await get_xp_history(db, profile.id, page, per_page)
    return XPHistoryResponse(
        entries=[
            XPHistoryEntry(
                amount=e.amount,
                source=e.source,
                source_id=e.source_id,
                description=e.description,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/users/me/gamification", response_model=GamificationSummaryResponse)
async def get_gamification_summary(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Full gamification summary from the denormalized profile counters."""
    earned = await list_earned_badges(db, profile.id)
    catalog = await list_badges(db)

    return GamificationSummaryResponse(
        xp=XPResponse.from_xp(profile.experience_points),
        badges={
            "earned": len(earned),
            "total": len(catalog),
        },
        stats={
            "total_books_read": profile.total_books_read,
            "total_pages_read": profile.total_pages_read,
        },
    )
