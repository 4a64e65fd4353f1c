"""Simple in-memory rate limiter for the study generation endpoint."""

import asyncio
import time
from collections import defaultdict

from src.core.config import settings


class RateLimiter:
    """
    Sliding window rate limiter per client identifier.

    Each generation fans out into several long LLM calls, so the generate
    endpoint caps how often a single client may start one. Clients whose
    window has emptied are dropped at most once per window, so the table
    only holds callers seen recently.
    """

    def __init__(
        self,
        max_requests: int | None = None,
        window_seconds: int | None = None,
    ):
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window_seconds
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._lock = asyncio.Lock()
        self._last_sweep = time.time()

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    async def is_allowed(self, client_id: str) -> bool:
        """
        Check if a request from the client is allowed.

        Args:
            client_id: Caller identifier (remote address)

        Returns:
            True if request is allowed, False if rate limit exceeded
        """
        async with self._lock:
            now = time.time()
            cutoff = now - self.window_seconds

            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            recent = [ts for ts in self._requests.get(client_id, ()) if ts > cutoff]
            if len(recent) >= self.max_requests:
                self._requests[client_id] = recent
                return False

            recent.append(now)
            self._requests[client_id] = recent
            return True

    def _sweep(self, cutoff: float) -> int:
        stale_clients = []
        for client_id, timestamps in self._requests.items():
            valid = [ts for ts in timestamps if ts > cutoff]
            if not valid:
                stale_clients.append(client_id)
            else:
                self._requests[client_id] = valid

        for client_id in stale_clients:
            del self._requests[client_id]
        return len(stale_clients)

    async def cleanup(self) -> int:
        """
        Remove stale entries from the rate limiter.

        Returns:
            Number of clients cleaned up
        """
        async with self._lock:
            now = time.time()
            self._last_sweep = now
            return self._sweep(now - self.window_seconds)


# Singleton instance
rate_limiter = RateLimiter()
