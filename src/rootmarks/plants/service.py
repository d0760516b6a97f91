"""Plant scan business logic."""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from rootmarks.db.models import PlantScan

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rootmarks.plants.analyzer import BaseImageAnalyzer

logger = structlog.get_logger()

UNKNOWN_HEALTH = "Unknown"

_DATA_URL = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", re.DOTALL)


def decode_image_data(image_data: str, max_bytes: int) -> bytes:
    """
    Validate an image data URL and return the decoded bytes.

    Raises:
        ValueError: If it is not an image data URL, not valid base64, or too large.
    """
    match = _DATA_URL.match(image_data.strip())
    if match is None:
        msg = "Image must be a base64 image data URL"
        raise ValueError(msg)

    try:
        raw = base64.b64decode(match.group(2), validate=True)
    except binascii.Error as e:
        msg = "Image data is not valid base64"
        raise ValueError(msg) from e

    if not raw:
        msg = "Image data is empty"
        raise ValueError(msg)
    if len(raw) > max_bytes:
        if max_bytes >= 1024 * 1024:
            limit = f"{max_bytes // (1024 * 1024)} MB"
        else:
            limit = f"{max_bytes} bytes"
        msg = f"Image must be at most {limit}"
        raise ValueError(msg)
    return raw


def health_status_from(analysis: str) -> str:
    """First line of the analysis, or "Unknown" when it is blank."""
    first_line = analysis.split("\n", 1)[0].strip()
    return first_line or UNKNOWN_HEALTH


async def create_scan(
    db: AsyncSession,
    analyzer: BaseImageAnalyzer,
    user_id: str,
    image_data: str,
    max_bytes: int,
) -> PlantScan:
    """
    Analyze a plant photo and store the result.

    Raises:
        ValueError: If the image is rejected before analysis.
        PlantAnalysisError: If the analysis service fails. Nothing is stored.
    """
    raw = decode_image_data(image_data, max_bytes)
    analysis = await analyzer.analyze(image_data)

    scan = PlantScan(
        user_id=user_id,
        image_url=image_data,
        health_status=health_status_from(analysis)[:256],
        tips=analysis,
        created_at=datetime.now(timezone.utc),
    )
    db.add(scan)
    await db.flush()

    logger.info("plant_scan_created", user_id=user_id, scan_id=scan.id, image_bytes=len(raw))
    return scan


async def list_scans(db: AsyncSession, user_id: str) -> list[PlantScan]:
    """The reader's scans, newest first."""
    result = await db.execute(
        select(PlantScan)
        .where(PlantScan.user_id == user_id)
        .order_by(PlantScan.created_at.desc(), PlantScan.id.desc())
    )
    return list(result.scalars().all())
