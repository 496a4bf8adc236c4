"""
Shared ranking utilities for the leaderboard.

Provides the sort key mapping, threshold filtering and page arithmetic used by
LeaderboardService so ordering rules live in one place.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from gitranks.data_models.users import LeaderboardRow

_NEG_INF = float('-inf')


@dataclass(frozen=True)
class RowFilters:
    """Minimum thresholds applied to leaderboard rows."""
    min_repos: int = 0
    min_followers: int = 0
    min_contribs: int = 0
    min_stars: int = 0
    min_forks: int = 0


class RankingUtility:
    """Shared ranking logic for leaderboard rows."""

    DEFAULT_SORT = 'followers'

    @staticmethod
    def get_sort_key_mapping() -> Dict[str, Callable[[LeaderboardRow], float]]:
        """Sort key per public sort name.

        Missing star/fork totals sort below every real value, so they land
        last in descending order and first in ascending order.
        """
        return {
            'followers': lambda row: row.user.followers,
            'publicRepos': lambda row: row.user.public_repos,
            'contribs': lambda row: row.user.contributions or 0,
            'stars': lambda row: _NEG_INF if row.total_stars is None else row.total_stars,
            'forks': lambda row: _NEG_INF if row.total_forks is None else row.total_forks,
        }

    @staticmethod
    def validate_sort_by(sort_by: str) -> bool:
        """Validate sort_by parameter against allowed values."""
        return sort_by in RankingUtility.get_sort_key_mapping()

    @staticmethod
    def normalize_sort_by(sort_by: str) -> str:
        """Unknown sort names fall back to followers."""
        return sort_by if RankingUtility.validate_sort_by(sort_by) else RankingUtility.DEFAULT_SORT

    @staticmethod
    def normalize_order(order: str) -> str:
        return 'asc' if str(order or '').lower() == 'asc' else 'desc'

    @staticmethod
    def sort_rows(rows: List[LeaderboardRow], sort_by: str, order: str) -> List[LeaderboardRow]:
        """Return rows sorted by key and direction. Equal keys keep their prior order."""
        key = RankingUtility.get_sort_key_mapping()[RankingUtility.normalize_sort_by(sort_by)]
        return sorted(rows, key=key, reverse=RankingUtility.normalize_order(order) == 'desc')

    @staticmethod
    def filter_rows(rows: List[LeaderboardRow], filters: RowFilters, include_repo_totals: bool) -> List[LeaderboardRow]:
        """Keep rows meeting every threshold; star/fork thresholds need repo totals."""
        def passes(row: LeaderboardRow) -> bool:
            if row.user.public_repos < filters.min_repos:
                return False
            if row.user.followers < filters.min_followers:
                return False
            if (row.user.contributions or 0) < filters.min_contribs:
                return False
            if include_repo_totals:
                if (row.total_stars or 0) < filters.min_stars:
                    return False
                if (row.total_forks or 0) < filters.min_forks:
                    return False
            return True

        return [row for row in rows if passes(row)]

    @staticmethod
    def page_rank(page: int, per_page: int, position: int) -> int:
        """1-based global rank for the row at ``position`` within ``page``."""
        return (page - 1) * per_page + position + 1
