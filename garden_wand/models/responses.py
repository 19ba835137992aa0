"""API response models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from garden_wand.engine.result import Failure, Region


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    cache_entries: int = 0


class RegionModel(BaseModel):
    outer: list[tuple[float, float]]
    holes: list[list[tuple[float, float]]] = Field(default_factory=list)
    budget_exceeded: bool = False
    pixel_count: int = 0

    @classmethod
    def from_region(cls, region: Region) -> RegionModel:
        return cls(
            outer=list(region.outer),
            holes=[list(h) for h in region.holes],
            budget_exceeded=region.budget_exceeded,
            pixel_count=region.pixel_count,
        )


class FailureModel(BaseModel):
    kind: str
    message: str = ""

    @classmethod
    def from_failure(cls, failure: Failure) -> FailureModel:
        return cls(kind=failure.kind.value, message=failure.message)


class ExtractResponse(BaseModel):
    status: Literal["ok", "failed"]
    region: RegionModel | None = None
    failure: FailureModel | None = None
    processing_time_ms: float = 0.0
