"""Profile management business logic."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from rootmarks.db.models import Profile
from rootmarks.profiles.avatars import is_known_avatar

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_profile(db: AsyncSession, user_id: str, *, for_update: bool = False) -> Profile | None:
    """Fetch a profile by id, optionally locking the row for the transaction."""
    stmt = select(Profile).where(Profile.id == user_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_or_create_profile(
    db: AsyncSession,
    user_id: str,
    email: str | None = None,
    *,
    for_update: bool = False,
) -> Profile:
    """Get or create the profile row for an authenticated user."""
    profile = await get_profile(db, user_id, for_update=for_update)
    if profile is None:
        now = datetime.now(timezone.utc)
        profile = Profile(
            id=user_id,
            email=email,
            total_books_read=0,
            total_pages_read=0,
            experience_points=0,
            avatar_id="default",
            created_at=now,
            updated_at=now,
        )
        db.add(profile)
        await db.flush()
        logger.info("profile_created", user_id=user_id)
    return profile


async def update_username(db: AsyncSession, profile: Profile, username: str) -> Profile:
    """
    Update the display name.

    Raises:
        ValueError: If the name is blank after trimming.
    """
    username = username.strip()
    if not username:
        msg = "Username cannot be blank"
        raise ValueError(msg)

    profile.username = username
    profile.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return profile


async def update_avatar(db: AsyncSession, profile: Profile, avatar_id: str) -> Profile:
    """
    Select an avatar from the catalog.

    Raises:
        ValueError: If the avatar id is not in the catalog.
    """
    if not is_known_avatar(avatar_id):
        msg = f"Unknown avatar: {avatar_id}"
        raise ValueError(msg)

    previous = profile.avatar_id
    profile.avatar_id = avatar_id
    profile.updated_at = datetime.now(timezone.utc)
    await db.flush()

    logger.info("avatar_updated", user_id=profile.id, previous=previous, new=avatar_id)
    return profile
