"""
Analysis Result Cache

Bounded in-memory cache for analysis results.
Key = SHA-256(text + serialized options). Capacity 100 by default; when
full, the oldest inserted key is evicted (FIFO). Results are deep-copied
on the way in and out, so callers never share a stored object.

Usage:
    cache = AnalysisCache(max_entries=100)
    key = cache.make_key(text, options_json)
    cached = cache.get(key)
    if cached is None:
        cached = run_analysis(...)
        cache.put(key, cached)
"""

from __future__ import annotations

import copy
import hashlib
import threading
from typing import Any, Optional


class AnalysisCache:
    """Thread-safe FIFO cache with hit/miss counters."""

    def __init__(self, max_entries: int = 100):
        self._cache: dict[str, Any] = {}
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(text: str, options: str = "") -> str:
        """SHA-256 hash of text + serialized options."""
        raw = f"{text}||{options}"
        return hashlib.sha256(raw.encode()).hexdigest()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached result, or None on a miss."""
        with self._lock:
            result = self._cache.get(key)
            if result is None:
                self._misses += 1
                return None
            self._hits += 1
            return copy.deepcopy(result)

    def put(self, key: str, result: Any) -> None:
        """Store a result. Evicts the oldest inserted key if at capacity."""
        if self._max_entries <= 0:
            return
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_entries:
                oldest_key = next(iter(self._cache))
                del self._cache[oldest_key]
            self._cache[key] = copy.deepcopy(result)

    def invalidate(self, key: str) -> None:
        """Remove a specific entry."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    @property
    def stats(self) -> dict:
        """Cache hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "entries": len(self._cache),
            "max_entries": self._max_entries,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }
