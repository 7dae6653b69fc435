from __future__ import annotations

from fastapi import APIRouter, Depends

from app.adapters.registry import HandlerRegistry
from server.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    """Return service health status for monitoring and load balancers."""
    return {
        "ok": True,
        "service": settings.app_name,
        "version": settings.app_version,
        "channel_types": HandlerRegistry.channel_types(),
    }


@router.get("/healthz")
async def healthz() -> dict:
    """Alternative health endpoint (kept for compatibility)."""
    return {"status": "ok"}
