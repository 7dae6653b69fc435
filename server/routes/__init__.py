"""Router aggregation."""

from __future__ import annotations

from fastapi import APIRouter

from app.routers import channels as channels_router_module
from app.routers import health as health_router_module

# Gateways call back on fixed paths (/c/<type>/<uuid>/<action>), so no prefix
api_router = APIRouter()

api_router.include_router(health_router_module.router)
api_router.include_router(channels_router_module.router)

__all__ = ["api_router"]
