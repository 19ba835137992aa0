"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field, FiniteFloat


class ExtractRequest(BaseModel):
    image: str = Field(..., description="Base64-encoded reference image (PNG, JPEG, ...)")
    seed: tuple[FiniteFloat, FiniteFloat] = Field(..., description="Clicked pixel (x, y) in image coordinates")
    tolerance: int | None = Field(
        default=None,
        ge=0,
        le=255,
        description="Per-channel color tolerance; server default when omitted",
    )
    max_pixels: int | None = Field(
        default=None,
        ge=1,
        description="Flood-fill pixel budget; server default when omitted",
    )
    existing_areas: list[list[tuple[float, float]]] = Field(
        default_factory=list,
        description="Existing area polygons in image coordinates",
    )
    respect_existing: bool = Field(
        default=False,
        description="Keep the fill out of existing areas",
    )
