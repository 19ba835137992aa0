"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from garden_wand.dependencies import get_extractor
from garden_wand.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    cache = get_extractor().cache
    return HealthResponse(
        status="ok",
        version="0.1.0",
        cache_entries=len(cache) if cache is not None else 0,
    )
