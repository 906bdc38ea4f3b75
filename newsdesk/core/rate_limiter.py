"""Fixed-window, per-client-IP throttling for the login endpoint."""

from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request


class _RateLimiter:
    def __init__(self) -> None:
        # key -> (hits in window, window end)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, window_end) in self._windows.items() if window_end <= now]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.monotonic()
        with self._lock:
            self._evict_expired(now)
            hits, window_end = self._windows.get(key, (0, now + window_seconds))
            hits += 1
            self._windows[key] = (hits, window_end)
        if hits > limit:
            raise HTTPException(429, "Too many requests. Try again shortly.")

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = _RateLimiter()


def client_address(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Peer address; X-Forwarded-For is only honoured behind a trusted proxy."""
    if trust_forwarded_for:
        forwarded = (request.headers.get("x-forwarded-for") or "").split(",")[0].strip()
        if forwarded:
            return forwarded
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(
    request: Request,
    scope: str,
    *,
    limit: int,
    window_seconds: int,
    trust_forwarded_for: bool = False,
) -> None:
    """Raise 429 once a client exceeds `limit` hits per window; limit <= 0 disables."""
    if limit <= 0:
        return
    address = client_address(request, trust_forwarded_for=trust_forwarded_for)
    _limiter.hit(f"{scope}:{address}", limit, window_seconds)


def tracked_clients() -> int:
    return _limiter.tracked_keys()


def reset_limits() -> None:
    _limiter.reset()
