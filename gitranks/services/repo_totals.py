"""
Repository totals aggregation.

Sums stars and forks over a user's owned repositories by paging
``/users/{login}/repos``. Pagination is capped, so very large accounts are
undercounted; any failed page ends the walk with the partial sum.
"""

from typing import Dict, Iterable, Tuple
from urllib.parse import quote

from gitranks.constants import CacheConstants, ConcurrencyConstants, PaginationConstants
from gitranks.data_models.users import RepoTotals
from gitranks.services.base import BaseService
from gitranks.services.github_client import coerce_count
from gitranks.utils.exceptions import GitRanksException
from gitranks.utils.logger import setup_logger
from gitranks.utils.worker_pool import run_worker_pool

logger = setup_logger(__name__)


class RepoTotalsService(BaseService):
    """Service for per-user star and fork totals."""

    async def fetch_totals(self, login: str) -> RepoTotals:
        """Walk the repository list uncached. Never raises for upstream failures."""
        totals, _ = await self._walk(login)
        return totals

    async def get_totals(self, login: str) -> RepoTotals:
        """Cached totals for one user. Partial sums from a failed walk are not cached."""
        key = f"repos:{login}"
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        totals, complete = await self._walk(login)
        if complete:
            self.cache.set(key, totals, CacheConstants.USER_DATA_TTL)
        return totals

    async def get_totals_for(
        self,
        logins: Iterable[str],
        concurrency: int = ConcurrencyConstants.REPO_TOTALS_WORKERS,
    ) -> Dict[str, RepoTotals]:
        """Totals for many users using a fixed worker pool.

        Logins missing from the result failed unexpectedly; callers treat them
        as zero totals.
        """
        return await run_worker_pool(list(dict.fromkeys(logins)), self.get_totals, concurrency)

    async def _walk(self, login: str) -> Tuple[RepoTotals, bool]:
        per_page = PaginationConstants.REPO_PAGE_SIZE
        path = f"/users/{quote(login, safe='')}/repos"
        stars = 0
        forks = 0

        for page in range(1, PaginationConstants.MAX_REPO_PAGES + 1):
            try:
                batch = await self.client.get_json(path, params={
                    "per_page": per_page,
                    "page": page,
                    "type": "owner",
                    "sort": "updated",
                })
            except GitRanksException as e:
                logger.warning(f"Stopped repo totals for {login} at page {page}: {e}")
                return RepoTotals(stars=stars, forks=forks), False

            if not isinstance(batch, list):
                logger.warning(f"Stopped repo totals for {login}: unexpected payload on page {page}")
                return RepoTotals(stars=stars, forks=forks), False

            for repo in batch:
                if isinstance(repo, dict):
                    stars += coerce_count(repo.get("stargazers_count"))
                    forks += coerce_count(repo.get("forks_count"))

            if len(batch) < per_page:
                break

        # Reaching the page cap still counts as a complete walk
        return RepoTotals(stars=stars, forks=forks), True
