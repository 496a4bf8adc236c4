"""
Rate limiting infrastructure for the HTTP endpoints.

Simple in-memory sliding-window limiting using deques, keyed per client and
endpoint. Keeps a single noisy client from draining the shared GitHub quota.
"""

import time
import asyncio
from collections import defaultdict, deque
from typing import Callable
import logging

from fastapi import Request

from gitranks.utils.exceptions import InboundRateLimitError

logger = logging.getLogger(__name__)

class SimpleRateLimiter:
    """In-memory rate limiter for API requests.

    Note: request history is stored in memory per client:endpoint pair and
    is lost on restart. Pairs with no request inside the window are swept at
    most once per window.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._requests = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._clock = clock
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._requests)

    async def is_allowed(self, client_id: str, endpoint: str, limit: int, window: int) -> bool:
        """Check if client can call endpoint within rate limit."""
        # Input validation: reject invalid parameters
        if limit <= 0 or window <= 0:
            return False

        key = f"{client_id}:{endpoint}"
        now = self._clock()

        async with self._lock:
            if now - self._last_sweep >= window:
                self._sweep(now - window)
                self._last_sweep = now

            history = self._requests[key]
            # Clean old requests outside window
            while history and history[0] <= now - window:
                history.popleft()

            if len(history) < limit:
                history.append(now)
                return True

            return False

    def _sweep(self, cutoff: float):
        stale = [key for key, history in self._requests.items() if not history or history[-1] <= cutoff]
        for key in stale:
            del self._requests[key]
        if stale:
            logger.debug(f"Dropped {len(stale)} idle rate limit keys")

    def reset(self):
        self._requests.clear()
        self._last_sweep = 0.0

def rate_limit(endpoint: str):
    """FastAPI dependency applying the app's limiter to one endpoint.

    Limits come from ``app.state.rate_limit`` / ``app.state.rate_window``; a
    limit of 0 disables throttling.
    """
    async def dependency(request: Request):
        state = request.app.state
        limit = getattr(state, 'rate_limit', 0)
        window = getattr(state, 'rate_window', 60)
        limiter = getattr(state, 'rate_limiter', None)
        if not limit or limiter is None:
            return

        client_id = request.client.host if request.client else "unknown"
        if not await limiter.is_allowed(client_id, endpoint, limit, window):
            logger.warning(f"Throttled {client_id} on {endpoint}")
            raise InboundRateLimitError(endpoint, window)

    return dependency
