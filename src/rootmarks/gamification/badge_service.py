"""Badge catalog access and award service with duplicate prevention."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.database import dialect_insert
from rootmarks.db.models import BadgeDefinition, UserBadge
from rootmarks.gamification.xp_service import grant_xp

logger = logging.getLogger(__name__)

DEFAULT_BADGE_XP = 50


def badge_xp_reward(badge: BadgeDefinition) -> int:
    """XP credited for a badge; 50 when the definition sets none or zero."""
    return badge.xp_reward or DEFAULT_BADGE_XP


# ── Catalog access (read-only) ──


async def list_badges(db: AsyncSession) -> list[BadgeDefinition]:
    """All active badge definitions in catalog order."""
    result = await db.execute(
        select(BadgeDefinition)
        .where(BadgeDefinition.is_active.is_(True))
        .order_by(BadgeDefinition.sort_order, BadgeDefinition.id)
    )
    return list(result.scalars().all())


async def get_badge_by_slug(db: AsyncSession, slug: str) -> BadgeDefinition | None:
    """Fetch a badge definition by slug."""
    result = await db.execute(
        select(BadgeDefinition).where(BadgeDefinition.slug == slug)
    )
    return result.scalar_one_or_none()


async def list_earned_badge_ids(db: AsyncSession, user_id: str) -> set[int]:
    """Ids of every badge the user has earned."""
    result = await db.execute(
        select(UserBadge.badge_id).where(UserBadge.user_id == user_id)
    )
    return set(result.scalars().all())


async def list_earned_badges(db: AsyncSession, user_id: str) -> list[UserBadge]:
    """Earned relations with their badge, newest first."""
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
    )
    return list(result.scalars().all())


async def count_earners(db: AsyncSession) -> dict[int, int]:
    """Number of readers holding each badge, keyed by badge id."""
    result = await db.execute(
        select(UserBadge.badge_id, func.count()).group_by(UserBadge.badge_id)
    )
    return {badge_id: count for badge_id, count in result.all()}


async def has_badge(db: AsyncSession, user_id: str, badge_id: int) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


# ── Award ──


async def award_badge(
    db: AsyncSession,
    redis: object,
    user_id: str,
    badge: BadgeDefinition,
) -> bool:
    """Award a badge to a user.

    Returns True if awarded, False if already earned.
    Handles:
    1. Insert into user_badges (ON CONFLICT DO NOTHING on the unique pair)
    2. Grant badge XP, only once the insert has succeeded
    3. Publish badge_earned on Redis pub/sub
    """
    now = datetime.now(timezone.utc)

    stmt = (
        dialect_insert(db, UserBadge)
        .values(user_id=user_id, badge_id=badge.id, earned_at=now)
        .on_conflict_do_nothing(index_elements=["user_id", "badge_id"])
        .returning(UserBadge.id)
    )
    inserted = (await db.execute(stmt)).scalar_one_or_none()
    if inserted is None:
        logger.debug("Badge %s already earned by %s", badge.slug, user_id)
        return False

    credited = await grant_xp(
        db=db,
        user_id=user_id,
        amount=badge_xp_reward(badge),
        source="badge",
        source_id=badge.slug,
        description=f'Earned badge: "{badge.name}"',
        idempotency_key=f"badge:{badge.slug}:{user_id}",
    )
    if not credited:
        logger.warning(
            "Badge %s awarded to %s but its XP was already in the ledger",
            badge.slug, user_id,
        )

    logger.info("Awarded badge %s to %s", badge.slug, user_id)
    await _emit_badge_earned(redis, user_id, badge)
    return True


async def _emit_badge_earned(redis: object, user_id: str, badge: BadgeDefinition) -> None:
    """Broadcast the award for live celebration popups."""
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[attr-defined]
            "pubsub:badge_earned",
            json.dumps({
                "user_id": user_id,
                "badge_slug": badge.slug,
                "badge_name": badge.name,
                "difficulty": badge.difficulty,
                "xp_reward": badge_xp_reward(badge),
            }),
        )
    except Exception:
        logger.warning("Failed to publish badge_earned notification", exc_info=True)
