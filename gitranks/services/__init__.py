"""
Services package for GitRanks.

Aggregation pipeline: cache, GitHub client, detail fetching, repo totals,
leaderboard assembly, rank estimation and multi-user ranking.
"""

from .base import BaseService
from .cache import TTLCache
from .github_client import GitHubClient
from .leaderboard import LeaderboardService
from .rank_resolver import RankResolver
from .ranking import RankingService
from .rate_limiter import SimpleRateLimiter
from .repo_totals import RepoTotalsService
from .user_details import UserDetailsService

__all__ = [
    'BaseService',
    'GitHubClient',
    'LeaderboardService',
    'RankResolver',
    'RankingService',
    'RepoTotalsService',
    'SimpleRateLimiter',
    'TTLCache',
    'UserDetailsService',
]
