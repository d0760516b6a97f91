"""Profile router: /api/v1/users/me and the avatar catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.auth.dependencies import get_current_profile
from rootmarks.database import get_session
from rootmarks.db.models import Profile
from rootmarks.gamification.schemas import XPResponse
from rootmarks.profiles.avatars import AVATARS, avatar_emoji
from rootmarks.profiles.schemas import (
    AvatarListResponse,
    AvatarResponse,
    AvatarUpdateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
)
from rootmarks.profiles.service import update_avatar, update_username

router = APIRouter(prefix="/api/v1", tags=["Profiles"])


def _profile_response(profile: Profile) -> ProfileResponse:
    """Build a ProfileResponse from a Profile model."""
    return ProfileResponse(
        id=profile.id,
        username=profile.username,
        email=profile.email,
        avatar_id=profile.avatar_id,
        avatar_emoji=avatar_emoji(profile.avatar_id),
        total_books_read=profile.total_books_read,
        total_pages_read=profile.total_pages_read,
        experience_points=profile.experience_points,
        level=XPResponse.from_xp(profile.experience_points),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/users/me", response_model=ProfileResponse)
async def get_my_profile(
    profile: Profile = Depends(get_current_profile),
) -> ProfileResponse:
    """Get own profile with resolved level."""
    return _profile_response(profile)


@router.patch("/users/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Set the display name."""
    try:
        profile = await update_username(db, profile, body.username)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _profile_response(profile)


@router.put("/users/me/avatar", response_model=ProfileResponse)
async def update_my_avatar(
    body: AvatarUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Select an avatar from the catalog."""
    try:
        profile = await update_avatar(db, profile, body.avatar_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _profile_response(profile)


# ---------------------------------------------------------------------------
# Avatars
# ---------------------------------------------------------------------------


@router.get("/avatars", response_model=AvatarListResponse)
async def list_avatars() -> AvatarListResponse:
    return AvatarListResponse(avatars=[AvatarResponse(**a) for a in AVATARS])
