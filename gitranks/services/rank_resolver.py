"""
Global rank estimation for a single user.

GitHub has no "rank of user X" endpoint, so the rank is inferred from search
counts. Each fallback trades precision for availability:

1. ``followers:>F``  -> count + 1 (exact)
2. ``followers:>=F`` -> count (includes the user, one off)
3. fixed conservative estimate
"""

from gitranks.constants import CacheConstants, GitHubConstants, RankConstants
from gitranks.services.base import BaseService
from gitranks.utils.exceptions import GitRanksException
from gitranks.utils.logger import setup_logger

logger = setup_logger(__name__)


class RankResolver(BaseService):
    """Estimates a user's position in the global follower ranking."""

    async def _count(self, query: str) -> int:
        return await self.cached(
            f"rank:count:{query}",
            CacheConstants.RANK_COUNT_TTL,
            lambda: self.client.search_total("users", query),
        )

    async def estimate_rank(self, followers: int) -> int:
        """Estimated 1-based global rank for a user with ``followers`` followers. Never raises."""
        if followers <= 0:
            try:
                return await self._count(GitHubConstants.LEADERBOARD_QUERY) + 1
            except GitRanksException as e:
                logger.warning(f"Rank count for zero-follower user failed: {e}")
                return RankConstants.FALLBACK_RANK

        try:
            return await self._count(f"followers:>{followers}") + 1
        except GitRanksException as e:
            logger.warning(f"Strict rank count for {followers} followers failed, retrying inclusive: {e}")

        try:
            return await self._count(f"followers:>={followers}")
        except GitRanksException as e:
            logger.warning(f"Inclusive rank count for {followers} followers failed: {e}")

        return RankConstants.FALLBACK_RANK
