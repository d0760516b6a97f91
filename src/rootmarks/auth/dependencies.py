"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.auth.jwt import verify_token
from rootmarks.database import get_session
from rootmarks.db.models import Profile
from rootmarks.profiles.service import get_or_create_profile

_bearer = HTTPBearer()


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Profile:
    """
    Verify the bearer token and return the reader's profile.

    The profile is created on first sight of a subject. Raises 401 on a bad token.
    """
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    profile = await get_or_create_profile(db, str(payload["sub"]), payload.get("email"))
    await db.commit()
    return profile
