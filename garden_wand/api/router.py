"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from garden_wand.api import extract, health

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(extract.router)
