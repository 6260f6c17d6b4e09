"""
Rate Limiting

Per-client sliding window limiter applied to the notes routes as a FastAPI
dependency. State lives in process memory, so each worker counts on its own.
"""

import logging
import math
import time
from collections import defaultdict, deque
from collections.abc import Iterable

from fastapi import HTTPException, Request, status

from mod_notes.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding window request counter keyed by client address.

    Usage::

        limiter = RateLimiter(max_requests=100, window_seconds=60)
        allowed, retry_after = limiter.hit("10.0.0.7")
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        allow_list: Iterable[str] = (),
        enabled: bool = True,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.allow_list = frozenset(allow_list)
        self.enabled = enabled
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def hit(self, key: str, now: float | None = None) -> tuple[bool, int]:
        """
        Record one request for ``key``.

        Returns:
            ``(allowed, retry_after)``. ``retry_after`` is the number of whole
            seconds until the oldest counted request leaves the window, 0 when
            allowed. Rejected requests are not counted.
        """
        if not self.enabled or key in self.allow_list:
            return True, 0

        now = time.monotonic() if now is None else now
        hits = self._hits[key]
        window_start = now - self.window_seconds
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
            return False, retry_after

        hits.append(now)
        return True, 0

    def reset(self) -> None:
        """Forget every recorded request."""
        self._hits.clear()


rate_limiter = RateLimiter(
    max_requests=settings.RATE_LIMIT_MAX,
    window_seconds=settings.RATE_LIMIT_WINDOW,
    allow_list=settings.RATE_LIMIT_ALLOW_LIST,
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency: 429 with ``Retry-After`` once a client is over limit."""
    client = request.client.host if request.client else "unknown"
    allowed, retry_after = rate_limiter.hit(client)
    if allowed:
        return

    logger.warning(f"Rate limit exceeded for {client} on {request.url.path}")
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Rate limit exceeded, retry in {retry_after} seconds",
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(rate_limiter.max_requests),
            "X-RateLimit-Remaining": "0",
        },
    )
