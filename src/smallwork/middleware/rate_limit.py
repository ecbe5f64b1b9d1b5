"""Fixed-window rate limiting middleware.

Counts requests per client inside a time window and answers 429 once
the limit is exceeded. State lives in memory on the middleware instance.
"""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.middleware.protocol import Next

logger = logging.getLogger("smallwork.middleware")


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for request rate limiting."""

    max_requests: int = 60
    window_seconds: int = 60
    key_headers: tuple[str, ...] = ("x-forwarded-for", "x-real-ip")


class RateLimitMiddleware:
    """In-memory, per-client fixed-window limiter.

    Clients are identified by the first hop of ``X-Forwarded-For``, then
    ``X-Real-Ip``, then the shared key ``"unknown"``. Every response gets
    ``X-RateLimit-Limit`` and ``X-RateLimit-Remaining``; rejected ones
    also get ``Retry-After``.
    """

    __slots__ = ("_clock", "_config", "_lock", "_state")

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (count, window reset time)
        self._state: dict[str, tuple[int, float]] = {}

    def _identity_key(self, request: Request) -> str:
        for header_name in self._config.key_headers:
            raw = request.header(header_name)
            if raw:
                # Comma-separated proxy chain, first hop is the client
                first = raw.split(",")[0].strip()
                if first:
                    return first
        return "unknown"

    def _hit(self, key: str, now: float) -> tuple[int, float]:
        with self._lock:
            count, reset_at = self._state.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + self._config.window_seconds
            count += 1
            self._state[key] = (count, reset_at)
            return count, reset_at

    def reset(self) -> None:
        """Forget all counters."""
        with self._lock:
            self._state.clear()

    def handle(self, request: Request, next: Next) -> Response:
        limit = self._config.max_requests
        key = self._identity_key(request)
        now = self._clock()
        count, reset_at = self._hit(key, now)

        if count > limit:
            retry_after = math.ceil(reset_at - now)
            logger.info("Rate limit exceeded for %s on %s %s", key, request.method, request.path)
            return Response.json(
                {"error": "Too Many Requests", "retry_after": retry_after},
                status=429,
            ).with_headers(
                {
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                }
            )

        remaining = max(0, limit - count)
        return next(request).with_headers(
            {
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": str(remaining),
            }
        )
