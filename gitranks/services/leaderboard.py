"""
Leaderboard service for the global GitHub follower ranking.

Orchestrates search -> detail fetch -> optional repo totals -> filter -> sort
for one page, or resolves a single named user with an estimated global rank.
"""

from typing import Any, Dict, List, Optional

from gitranks.constants import CacheConstants, GitHubConstants, PaginationConstants
from gitranks.data_models.users import LeaderboardPage, LeaderboardRow, RepoTotals
from gitranks.services.base import BaseService
from gitranks.services.cache import TTLCache
from gitranks.services.github_client import GitHubClient
from gitranks.services.rank_resolver import RankResolver
from gitranks.services.repo_totals import RepoTotalsService
from gitranks.services.user_details import UserDetailsService
from gitranks.utils.logger import setup_logger
from gitranks.utils.ranking import RankingUtility, RowFilters

logger = setup_logger(__name__)


class LeaderboardService(BaseService):
    """Service for leaderboard pages and named-user lookups."""

    def __init__(
        self,
        client: GitHubClient,
        cache: TTLCache,
        details_service: Optional[UserDetailsService] = None,
        repo_totals_service: Optional[RepoTotalsService] = None,
        rank_resolver: Optional[RankResolver] = None,
    ):
        super().__init__(client, cache)
        self.details_service = details_service or UserDetailsService(client, cache)
        self.repo_totals_service = repo_totals_service or RepoTotalsService(client, cache)
        self.rank_resolver = rank_resolver or RankResolver(client, cache)

    async def get_page(
        self,
        page: int = 1,
        sort_by: str = "followers",
        order: str = "desc",
        include_repo_totals: bool = False,
        filters: Optional[RowFilters] = None,
        search: Optional[str] = None,
    ) -> LeaderboardPage:
        """
        Get one leaderboard page, or the single-row page for ``search``.

        Raises:
            RateLimitError: GitHub quota exhausted during a required fetch
            UpstreamError: the search call itself failed
        """
        search = (search or "").strip()
        if search:
            return await self._get_named_user_page(search, include_repo_totals)

        page = max(1, int(page))
        per_page = PaginationConstants.LEADERBOARD_PAGE_SIZE
        filters = filters or RowFilters()

        search_result = await self.cached(
            f"search:followers:page:{page}",
            CacheConstants.LEADERBOARD_SEARCH_TTL,
            lambda: self.client.search_users(
                GitHubConstants.LEADERBOARD_QUERY,
                page=page,
                per_page=per_page,
                sort="followers",
                order="desc",
            ),
        )
        total_available = min(GitHubConstants.SEARCH_RESULT_WINDOW, search_result["total_count"])

        logins = self._unique_logins(search_result["items"])
        details = await self.details_service.fetch_many(logins)

        totals: Dict[str, RepoTotals] = {}
        if include_repo_totals:
            totals = await self.repo_totals_service.get_totals_for(logins)

        rows: List[LeaderboardRow] = []
        for position, (login, user) in enumerate(zip(logins, details)):
            repo_totals = totals.get(login, RepoTotals()) if include_repo_totals else None
            rows.append(LeaderboardRow(
                user=user,
                rank=RankingUtility.page_rank(page, per_page, position),
                total_stars=repo_totals.stars if repo_totals else None,
                total_forks=repo_totals.forks if repo_totals else None,
            ))

        rows = RankingUtility.filter_rows(rows, filters, include_repo_totals)
        rows = RankingUtility.sort_rows(rows, sort_by, order)

        logger.info(
            f"Assembled leaderboard page {page}: {len(rows)}/{len(logins)} rows "
            f"(sort={sort_by} {order}, repo_totals={include_repo_totals})"
        )

        return LeaderboardPage(
            page=page,
            per_page=per_page,
            total=total_available,
            has_next=page * per_page < total_available,
            has_prev=page > 1,
            users=rows,
        )

    async def _get_named_user_page(self, term: str, include_repo_totals: bool) -> LeaderboardPage:
        """Single-row page for one user, ranked by estimated global position."""
        search_result = await self.cached(
            f"search:user:{term.lower()}",
            CacheConstants.NAMED_SEARCH_TTL,
            lambda: self.client.search_users(
                f"{term} in:login",
                per_page=PaginationConstants.NAMED_SEARCH_PAGE_SIZE,
            ),
        )
        login = self._pick_login(term, search_result["items"])
        if login is None:
            logger.info(f"No GitHub user matched '{term}'")
            return LeaderboardPage(page=1, per_page=1, total=0, has_next=False, has_prev=False, users=[])

        user = await self.details_service.fetch_one(login)
        repo_totals = await self.repo_totals_service.get_totals(login) if include_repo_totals else None
        rank = await self.rank_resolver.estimate_rank(user.followers)

        row = LeaderboardRow(
            user=user,
            rank=rank,
            total_stars=repo_totals.stars if repo_totals else None,
            total_forks=repo_totals.forks if repo_totals else None,
        )
        return LeaderboardPage(page=1, per_page=1, total=1, has_next=False, has_prev=False, users=[row])

    @staticmethod
    def _unique_logins(items: List[Dict[str, Any]]) -> List[str]:
        logins = [item.get("login") for item in items if item.get("login")]
        return list(dict.fromkeys(logins))

    @staticmethod
    def _pick_login(term: str, items: List[Dict[str, Any]]) -> Optional[str]:
        """Exact case-insensitive match first, otherwise the best search hit."""
        logins = [item.get("login") for item in items if item.get("login")]
        for login in logins:
            if login.lower() == term.lower():
                return login
        return logins[0] if logins else None
