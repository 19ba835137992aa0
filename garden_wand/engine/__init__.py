"""Garden Wand region-extraction engine."""

from garden_wand.engine.cache import CacheKey, ExtractionCache
from garden_wand.engine.config import ExtractionConfig
from garden_wand.engine.extractor import RegionExtractor, extract_region
from garden_wand.engine.raster import ArrayRaster, RasterAccessor
from garden_wand.engine.result import Failure, FailureKind, Region

__all__ = [
    "ArrayRaster",
    "CacheKey",
    "ExtractionCache",
    "ExtractionConfig",
    "Failure",
    "FailureKind",
    "RasterAccessor",
    "Region",
    "RegionExtractor",
    "extract_region",
]
