"""
In-memory rate limiting for public form endpoints.

Keeps the contact form from being used to flood the store inbox.
Sliding-window counter per (client IP, route).
"""
import time
import logging
from collections import defaultdict

from fastapi import Request

from config import settings
from domain.errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Simple in-memory sliding-window rate limiter.

    Tracks request timestamps per (IP, route) key.
    Not shared between worker processes.
    """

    def __init__(self):
        # {key: [timestamp1, timestamp2, ...]}
        self._requests: dict[str, list[float]] = defaultdict(list)

    def _cleanup(self, key: str, window_seconds: int):
        cutoff = time.time() - window_seconds
        self._requests[key] = [ts for ts in self._requests[key] if ts > cutoff]

    def check(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """
        Record a request for ``key`` if it fits in the window.

        Returns:
            True if allowed, False if rate-limited
        """
        self._cleanup(key, window_seconds)
        if len(self._requests[key]) >= max_requests:
            return False
        self._requests[key].append(time.time())
        return True

    def remaining(self, key: str, max_requests: int, window_seconds: int) -> int:
        self._cleanup(key, window_seconds)
        return max(0, max_requests - len(self._requests[key]))

    def reset(self):
        self._requests.clear()


limiter = RateLimiter()


def rate_limit(max_requests: int | None = None, window_seconds: int | None = None):
    """
    FastAPI dependency factory for rate limiting.

    Limits default to the contact form settings and are read per request,
    so changing settings at runtime takes effect immediately.

    Usage:
        @router.post("/submit", dependencies=[Depends(rate_limit())])
    """
    async def _check_rate_limit(request: Request):
        limit = max_requests or settings.contact_rate_limit
        window = window_seconds or settings.contact_rate_window_seconds

        client_ip = request.client.host if request.client else "unknown"
        route_path = request.url.path
        key = f"{client_ip}:{route_path}"

        if not limiter.check(key, limit, window):
            logger.warning(f"Rate limit exceeded: {client_ip} on {route_path} ({limit}/{window}s)")
            raise RateLimitError(
                f"Too many requests. Maximum {limit} per {window} seconds. Try again later.",
                details={"limit": limit, "window_seconds": window},
                headers={
                    "Retry-After": str(window),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": str(limiter.remaining(key, limit, window)),
                },
            )

    return _check_rate_limit
