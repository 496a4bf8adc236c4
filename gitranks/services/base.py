"""
Base service class for GitRanks.

Provides the shared GitHub client and TTL cache handles for all service layer
operations.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from gitranks.services.cache import TTLCache
from gitranks.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

T = TypeVar('T')

class BaseService:
    """Base class for all services with shared client and cache access."""

    def __init__(self, client: GitHubClient, cache: TTLCache):
        """
        Initialize base service with its collaborators.

        Args:
            client: GitHub client shared across the process
            cache: TTL cache shared across the process
        """
        self.client = client
        self.cache = cache

    async def cached(self, key: str, ttl: float, producer: Callable[[], Awaitable[T]]) -> T:
        """Return ``producer()`` through the shared cache under ``key``."""
        return await self.cache.get_or_set(key, ttl, producer)
