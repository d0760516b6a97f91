"""XP grant service with idempotency and level-up detection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.db.models import XPLedger
from rootmarks.gamification.level_thresholds import compute_level
from rootmarks.profiles.service import get_or_create_profile

logger = logging.getLogger(__name__)


async def grant_xp(
    db: AsyncSession,
    user_id: str,
    amount: int,
    source: str,
    source_id: str,
    description: str,
    idempotency_key: str,
) -> bool:
    """Grant XP to a user. Returns True if granted, False if duplicate.

    After granting:
    1. Insert into xp_ledger
    2. Update profiles.experience_points
    3. Log a level up if the tier changed
    """
    existing = await db.execute(
        select(XPLedger).where(XPLedger.idempotency_key == idempotency_key)
    )
    if existing.scalar_one_or_none():
        return False

    now = datetime.now(timezone.utc)

    entry = XPLedger(
        user_id=user_id,
        amount=amount,
        source=source,
        source_id=source_id,
        description=description,
        idempotency_key=idempotency_key,
        created_at=now,
    )
    db.add(entry)

    profile = await get_or_create_profile(db, user_id)
    old_level = compute_level(profile.experience_points)["level"]
    profile.experience_points += amount
    profile.updated_at = now

    await db.flush()

    new_level = compute_level(profile.experience_points)
    if new_level["level"] > old_level:
        logger.info(
            "Level up for %s: %d -> %d (%s)",
            user_id, old_level, new_level["level"], new_level["title"],
        )

    return True


async def get_xp_history(
    db: AsyncSession,
    user_id: str,
    page: int,
    per_page: int,
) -> tuple[list[XPLedger], int]:
    """Return one page of ledger entries (newest first) and the total count."""
    total_result = await db.execute(
        select(func.count()).select_from(XPLedger).where(XPLedger.user_id == user_id)
    )
    total = total_result.scalar_one()

    offset = (page - 1) * per_page
    result = await db.execute(
        select(XPLedger)
        .where(XPLedger.user_id == user_id)
        .order_by(XPLedger.created_at.desc(), XPLedger.id.desc())
        .offset(offset)
        .limit(per_page)
    )
    return list(result.scalars().all()), total
