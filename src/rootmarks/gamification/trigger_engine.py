"""Badge trigger engine: evaluates reading statistics against badge requirements."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.db.models import BadgeDefinition, Profile
from rootmarks.gamification.badge_service import award_badge, list_badges, list_earned_badge_ids
from rootmarks.gamification.qualification import ReadingStats, qualifying_badges

logger = logging.getLogger(__name__)


def stats_for(profile: Profile) -> ReadingStats:
    return ReadingStats(
        total_books_read=profile.total_books_read,
        total_pages_read=profile.total_pages_read,
    )


class TriggerEngine:
    """Evaluates badge triggers after a statistic-changing event.

    Does not commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, redis: object) -> None:
        self.db = db
        self.redis = redis
        self._badge_cache: list[BadgeDefinition] | None = None

    async def _load_badges(self) -> list[BadgeDefinition]:
        """Load and cache all active badge definitions."""
        if self._badge_cache is None:
            self._badge_cache = await list_badges(self.db)
        return self._badge_cache

    async def evaluate(self, profile: Profile) -> list[BadgeDefinition]:
        """Award every newly qualifying badge. Returns the badges awarded (may be empty)."""
        catalog = await self._load_badges()
        earned = await list_earned_badge_ids(self.db, profile.id)
        candidates = qualifying_badges(catalog, earned, stats_for(profile))

        awarded: list[BadgeDefinition] = []
        for badge in candidates:
            if await award_badge(self.db, self.redis, profile.id, badge):
                awarded.append(badge)

        if awarded:
            logger.info(
                "Awarded %d badge(s) to %s: %s",
                len(awarded), profile.id, ", ".join(b.slug for b in awarded),
            )
        return awarded
