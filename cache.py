#!/usr/bin/env python3
"""
Thread-safe in-memory cache for metadata lookups
Caches TMDB search outcomes (including misses) for the process lifetime so the
same (kind, query, year) is never requested twice.
"""

import threading
from typing import Dict, Optional, Tuple

from model import MetadataResult


CacheKey = Tuple[str, str, Optional[int]]


def make_cache_key(query: str, kind: str, year: Optional[int] = None) -> CacheKey:
    """Build the cache key for a search: (kind, lowercased query, year)"""
    return (str(getattr(kind, 'value', kind)), query.lower(), year)


class MetadataCache:
    """Thread-safe in-memory cache for metadata search results"""

    def __init__(self):
        """
        Initialize the cache

        Cache is unbounded (no size limit) and thread-safe. A cached value of
        None records a lookup that found nothing.
        """
        self._cache: Dict[CacheKey, Optional[MetadataResult]] = {}
        self._lock = threading.Lock()

    def lookup(self, key: CacheKey) -> Tuple[bool, Optional[MetadataResult]]:
        """
        Get a cached result by key

        Args:
            key: Cache key from make_cache_key

        Returns:
            (hit, result) where result may be None for a cached miss
        """
        with self._lock:
            if key in self._cache:
                return True, self._cache[key]
            return False, None

    def put(self, key: CacheKey, value: Optional[MetadataResult]) -> None:
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        """Clear all cached entries"""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._cache)
