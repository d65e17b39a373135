"""
Rate Limiter — Per-Client Request Throttling

Sliding-window limiter keyed by client address, held in memory.
The scam check is public (no API keys), so the client IP is the only
identity available. Limits come from the environment:

  FINSAFE_RATE_PER_MINUTE  (default 30)
  FINSAFE_RATE_PER_HOUR    (default 300)
  FINSAFE_RATE_LIMIT=false disables limiting (local development)
"""

from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from fastapi import HTTPException

# Clients tracked before the least-recently-seen one is dropped
MAX_TRACKED_CLIENTS = 5000


@dataclass
class RateWindow:
    """Request timestamps for one client."""
    timestamps: list[float] = field(default_factory=list)

    def count_within(self, window_seconds: float, now: Optional[float] = None) -> int:
        cutoff = (now or time.time()) - window_seconds
        return sum(1 for t in self.timestamps if t > cutoff)

    def prune(self, max_window: float, now: Optional[float] = None) -> None:
        cutoff = (now or time.time()) - max_window
        self.timestamps = [t for t in self.timestamps if t > cutoff]

    def record(self, now: Optional[float] = None) -> None:
        self.timestamps.append(now or time.time())


@dataclass(frozen=True)
class RateLimits:
    per_minute: int = 30
    per_hour: int = 300


DEFAULT_LIMITS = RateLimits(
    per_minute=int(os.getenv("FINSAFE_RATE_PER_MINUTE", "30")),
    per_hour=int(os.getenv("FINSAFE_RATE_PER_HOUR", "300")),
)

RATE_LIMIT_ENABLED = os.getenv("FINSAFE_RATE_LIMIT", "true").lower() == "true"

_windows: OrderedDict[str, RateWindow] = OrderedDict()
_lock = threading.Lock()


def check_rate_limit(
    client_id: Optional[str],
    limits: Optional[RateLimits] = None,
) -> None:
    """
    Record one request for client_id, or reject it.

    Raises:
        HTTPException 429 with a Retry-After header when either the
        per-minute or per-hour budget is spent.
    """
    if not RATE_LIMIT_ENABLED or not client_id:
        return

    limits = limits or DEFAULT_LIMITS
    now = time.time()

    with _lock:
        window = _windows.get(client_id)
        if window is None:
            if len(_windows) >= MAX_TRACKED_CLIENTS:
                _windows.popitem(last=False)
            window = _windows[client_id] = RateWindow()
        else:
            _windows.move_to_end(client_id)

        if window.count_within(60, now) >= limits.per_minute:
            oldest = min(t for t in window.timestamps if t > now - 60)
            retry_after = max(1, int(60 - (now - oldest)))
            raise HTTPException(
                status_code=429,
                detail=f"Too many requests: {limits.per_minute} per minute allowed.",
                headers={"Retry-After": str(retry_after)},
            )

        if window.count_within(3600, now) >= limits.per_hour:
            raise HTTPException(
                status_code=429,
                detail=f"Too many requests: {limits.per_hour} per hour allowed.",
                headers={"Retry-After": "3600"},
            )

        window.prune(3600, now)
        window.record(now)


def cleanup_stale_windows(max_age: float = 7200) -> int:
    """Forget clients idle for longer than max_age seconds. Returns how many."""
    cutoff = time.time() - max_age
    with _lock:
        stale = [
            k for k, w in _windows.items()
            if not w.timestamps or w.timestamps[-1] < cutoff
        ]
        for k in stale:
            del _windows[k]
    return len(stale)
