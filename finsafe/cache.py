"""
Check Result Cache

In-memory TTL cache for AI-backed check results.
Key = SHA-256(message + mode + engine version). TTL = 1 hour.

Local checks are never cached: the engine is cheaper than a hash
lookup. Only results that cost a Gemini call are stored, and only when
the call succeeded.

Usage:
    from finsafe.cache import check_cache
    cached = await check_cache.get(message, mode)
    if cached:
        return cached
    result = await check_full(...)
    await check_cache.put(message, mode, result)
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Optional

from finsafe.engine import ENGINE_VERSION


class CheckCache:
    """Coroutine-safe in-memory cache with TTL and oldest-first eviction."""

    def __init__(self, ttl_seconds: float = 3600, max_entries: int = 500):
        self._entries: dict[str, tuple[float, dict]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _make_key(message: str, mode: str) -> str:
        raw = f"{message}||{mode}||{ENGINE_VERSION}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    async def get(self, message: str, mode: str) -> Optional[dict]:
        """Return a copy of the cached result, or None if absent or expired."""
        key = self._make_key(message, mode)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            stored_at, result = entry
            if time.monotonic() - stored_at > self._ttl:
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return {**result, "cached": True}

    async def put(self, message: str, mode: str, result: dict) -> None:
        key = self._make_key(message, mode)
        async with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[oldest]
            self._entries[key] = (time.monotonic(), result)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }


# Shared across the application
check_cache = CheckCache()
