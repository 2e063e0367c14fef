from __future__ import annotations

from fastapi import APIRouter, Depends

from incident_access.configs.settings import Settings, get_settings
from incident_access.utils.response import success

router = APIRouter()


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    return success(
        {"ok": True, "service": settings.SERVICE_NAME, "environment": settings.ENVIRONMENT},
        message="healthy",
    )
