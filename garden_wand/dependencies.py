"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from garden_wand.config import settings
from garden_wand.engine.cache import ExtractionCache
from garden_wand.engine.extractor import RegionExtractor


@lru_cache(maxsize=1)
def get_extractor() -> RegionExtractor:
    """The app's extractor; owns the result cache shared by all requests."""
    return RegionExtractor(cache=ExtractionCache(max_entries=settings.cache_size))
