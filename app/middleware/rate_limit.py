"""Per-client rate limiting middleware.

Uses a sliding window to restrict how many requests each client (by IP)
can make within a configurable time window.  Defaults: 100 requests per
15 minutes.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.errors import TooManyRequestsError


class RateLimiter:
    """Sliding-window rate limiter.

    Thread-safe via asyncio.Lock.  Each client key gets its own request window.

    Attributes:
        max_requests: Cap per client (per window).
        window_seconds: Sliding-window length in seconds.
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 900) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        # client key -> deque of timestamps
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_sweep = time.monotonic()

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    def _sweep(self, now: float) -> None:
        """Forget clients whose newest request has left the window (at most once per window)."""
        if now - self._last_sweep < self.window_seconds:
            return
        cutoff = now - self.window_seconds
        for key in [k for k, ts in self._requests.items() if not ts or ts[-1] <= cutoff]:
            del self._requests[key]
        self._last_sweep = now

    async def hit(self, key: str) -> tuple[bool, int, int]:
        """Record a request for *key* if it is within the limit.

        Returns:
            (allowed, remaining, retry_after) – *retry_after* is the number of
            seconds until the oldest request in the window expires (0 when
            allowed).
        """
        async with self._lock:
            now = time.monotonic()
            self._sweep(now)
            timestamps = self._requests[key]

            # Evict timestamps outside the current window
            while timestamps and timestamps[0] <= now - self.window_seconds:
                timestamps.popleft()

            if len(timestamps) >= self.max_requests:
                retry_after = max(1, math.ceil(timestamps[0] + self.window_seconds - now))
                return False, 0, retry_after

            timestamps.append(now)
            return True, self.max_requests - len(timestamps), 0

    async def reset(self, key: str | None = None) -> None:
        """Reset counters.  If *key* is ``None``, reset everything."""
        async with self._lock:
            if key:
                self._requests.pop(key, None)
            else:
                self._requests.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients over their budget with a 429 envelope and standard headers."""

    def __init__(self, app: Callable, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        allowed, remaining, retry_after = await self.limiter.hit(client_key(request))
        headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
        }
        if not allowed:
            headers["Retry-After"] = str(retry_after)
            error = TooManyRequestsError()
            return error.to_envelope(request.url.path).to_response(headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
