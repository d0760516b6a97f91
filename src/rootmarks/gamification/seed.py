"""Badge seed data: reading milestones by books finished and pages read."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.database import dialect_insert
from rootmarks.db.models import BadgeDefinition

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    # Books finished
    {
        "slug": "first_book",
        "name": "First Chapter",
        "description": "Finish your very first book",
        "icon": "book",
        "requirement_type": "books_read",
        "requirement_value": 1,
        "difficulty": "easy",
        "xp_reward": 50,
        "sort_order": 1,
    },
    {
        "slug": "books_5",
        "name": "Bookworm",
        "description": "Finish 5 books and watch your garden sprout",
        "icon": "book-open",
        "requirement_type": "books_read",
        "requirement_value": 5,
        "difficulty": "normal",
        "xp_reward": 100,
        "sort_order": 2,
    },
    {
        "slug": "books_10",
        "name": "Library Builder",
        "description": "Finish 10 books",
        "icon": "library",
        "requirement_type": "books_read",
        "requirement_value": 10,
        "difficulty": "hard",
        "xp_reward": 200,
        "sort_order": 3,
    },
    {
        "slug": "books_25",
        "name": "Reading Royalty",
        "description": "Finish 25 books. A true legend of the shelves.",
        "icon": "crown",
        "requirement_type": "books_read",
        "requirement_value": 25,
        "difficulty": "legendary",
        "xp_reward": 500,
        "sort_order": 4,
    },
    # Pages read
    {
        "slug": "pages_100",
        "name": "Page Turner",
        "description": "Read 100 pages",
        "icon": "file-text",
        "requirement_type": "pages_read",
        "requirement_value": 100,
        "difficulty": "easy",
        "xp_reward": None,
        "sort_order": 5,
    },
    {
        "slug": "pages_1000",
        "name": "Scroll Keeper",
        "description": "Read 1,000 pages",
        "icon": "scroll",
        "requirement_type": "pages_read",
        "requirement_value": 1000,
        "difficulty": "normal",
        "xp_reward": 100,
        "sort_order": 6,
    },
    {
        "slug": "pages_5000",
        "name": "Marathon Reader",
        "description": "Read 5,000 pages",
        "icon": "trophy",
        "requirement_type": "pages_read",
        "requirement_value": 5000,
        "difficulty": "hard",
        "xp_reward": 250,
        "sort_order": 7,
    },
    {
        "slug": "pages_10000",
        "name": "Star of the Stacks",
        "description": "Read 10,000 pages",
        "icon": "star",
        "requirement_type": "pages_read",
        "requirement_value": 10000,
        "difficulty": "legendary",
        "xp_reward": 500,
        "sort_order": 8,
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert all badge definitions. Returns number of badges seeded."""
    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        stmt = dialect_insert(db, BadgeDefinition).values(**badge_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["slug"],
            set_={
                "name": stmt.excluded.name,
                "description": stmt.excluded.description,
                "icon": stmt.excluded.icon,
                "requirement_type": stmt.excluded.requirement_type,
                "requirement_value": stmt.excluded.requirement_value,
                "difficulty": stmt.excluded.difficulty,
                "xp_reward": stmt.excluded.xp_reward,
                "sort_order": stmt.excluded.sort_order,
            },
        )
        await db.execute(stmt)
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badge definitions", seeded)
    return seeded
