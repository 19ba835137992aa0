"""POST /api/extract — magic-wand region extraction on an uploaded image."""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import time

from fastapi import APIRouter, HTTPException
from PIL import Image, UnidentifiedImageError

from garden_wand.config import settings
from garden_wand.dependencies import get_extractor
from garden_wand.engine.raster import ArrayRaster
from garden_wand.engine.result import Failure
from garden_wand.models.requests import ExtractRequest
from garden_wand.models.responses import ExtractResponse, FailureModel, RegionModel

logger = logging.getLogger(__name__)

router = APIRouter()


def decode_image(data: str) -> ArrayRaster:
    """Base64 (optionally a data URL) → ArrayRaster. Raises HTTPException on bad input.

    The size limit is checked from the header, before any pixel data is
    decoded.
    """
    if data.startswith("data:"):
        data = data.partition(",")[2]
    try:
        raw = base64.b64decode(data, validate=True)
        image = Image.open(io.BytesIO(raw))
    except Image.DecompressionBombError as e:
        raise HTTPException(status_code=413, detail=f"Image is too large: {e}") from e
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Could not decode image: {e}") from e

    if image.width * image.height > settings.max_image_pixels:
        raise HTTPException(
            status_code=413,
            detail=f"Image is {image.width}x{image.height}; limit is {settings.max_image_pixels} pixels",
        )

    try:
        image.load()
    except (ValueError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Could not decode image: {e}") from e
    return ArrayRaster.from_image(image)


@router.post("/extract", response_model=ExtractResponse)
async def extract(req: ExtractRequest) -> ExtractResponse:
    start = time.perf_counter()
    raster = decode_image(req.image)

    tolerance = req.tolerance if req.tolerance is not None else settings.default_tolerance
    max_pixels = req.max_pixels if req.max_pixels is not None else settings.default_max_pixels
    extractor = get_extractor()

    def _run():
        return extractor.extract(
            raster,
            req.seed,
            tolerance,
            max_pixels=max_pixels,
            existing_areas=req.existing_areas,
            respect_existing=req.respect_existing,
        )

    # Extraction is CPU-bound; keep the event loop free
    result = await asyncio.get_running_loop().run_in_executor(None, _run)
    elapsed = round((time.perf_counter() - start) * 1000, 1)

    if isinstance(result, Failure):
        logger.info("Extract failed at %s: %s", req.seed, result.kind.value)
        return ExtractResponse(
            status="failed",
            failure=FailureModel.from_failure(result),
            processing_time_ms=elapsed,
        )
    return ExtractResponse(
        status="ok",
        region=RegionModel.from_region(result),
        processing_time_ms=elapsed,
    )
