"""Caller-owned LRU cache for extraction results.

Keyed by everything that determines a result, so two independent callers
never see each other's stale entries. Create one per owner (the HTTP
service keeps one); the engine itself never holds a global cache.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from garden_wand.engine.result import ExtractionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    raster_digest: str
    seed: tuple[int, int]
    tolerance: int
    max_pixels: int
    exclusion_digest: str = ""


class ExtractionCache:
    """Bounded least-recently-used map of CacheKey → result."""

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[CacheKey, ExtractionResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> ExtractionResult | None:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, key: CacheKey, result: ExtractionResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached extraction at seed %s", evicted.seed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
