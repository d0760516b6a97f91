"""Plant scanner router: /api/v1/plant-scans."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.auth.dependencies import get_current_profile
from rootmarks.config import get_settings
from rootmarks.database import get_session
from rootmarks.db.models import PlantScan, Profile
from rootmarks.plants.analyzer import BaseImageAnalyzer, get_plant_analyzer
from rootmarks.plants.schemas import PlantScanListResponse, PlantScanRequest, PlantScanResponse
from rootmarks.plants.service import create_scan, list_scans

router = APIRouter(prefix="/api/v1/plant-scans", tags=["Plants"])


def _scan_response(scan: PlantScan) -> PlantScanResponse:
    return PlantScanResponse(
        id=scan.id,
        image_url=scan.image_url,
        health_status=scan.health_status,
        tips=scan.tips,
        created_at=scan.created_at,
    )


@router.post("", response_model=PlantScanResponse, status_code=201)
async def scan_plant(
    body: PlantScanRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
    analyzer: BaseImageAnalyzer = Depends(get_plant_analyzer),
) -> PlantScanResponse:
    """Analyze a plant photo. Analysis failures surface as 502."""
    try:
        scan = await create_scan(
            db,
            analyzer,
            profile.id,
            body.image_data,
            max_bytes=get_settings().plant_scan_max_bytes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _scan_response(scan)


@router.get("", response_model=PlantScanListResponse)
async def get_my_scans(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> PlantScanListResponse:
    scans = await list_scans(db, profile.id)
    return PlantScanListResponse(scans=[_scan_response(s) for s in scans])
