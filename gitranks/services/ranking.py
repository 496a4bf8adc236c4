"""
Multi-user influence ranking.

Scores an explicit list of logins from four independently cached components
(user core, repo totals, PR count, issue count) and ranks them by descending
score. One failing user never fails the batch; it is ranked as a zero stub.
"""

import asyncio
from dataclasses import replace
from typing import Iterable, List, Optional

from gitranks.constants import CacheConstants
from gitranks.data_models.users import RankedUser, UserSummary
from gitranks.services.base import BaseService
from gitranks.services.cache import TTLCache
from gitranks.services.github_client import GitHubClient
from gitranks.services.repo_totals import RepoTotalsService
from gitranks.services.user_details import UserDetailsService
from gitranks.utils.exceptions import GitRanksException, UserNotFoundError, ValidationError
from gitranks.utils.logger import setup_logger
from gitranks.utils.scoring import InfluenceScoreCalculator

logger = setup_logger(__name__)


def _is_encodable(name: str) -> bool:
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def normalize_usernames(usernames: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Trim, drop blanks and unencodable names, and deduplicate keeping first-seen order."""
    cleaned = (str(name or "").strip() for name in (usernames or []))
    return list(dict.fromkeys(name for name in cleaned if name and _is_encodable(name)))


class RankingService(BaseService):
    """Service ranking a caller-supplied set of users."""

    def __init__(
        self,
        client: GitHubClient,
        cache: TTLCache,
        details_service: Optional[UserDetailsService] = None,
        repo_totals_service: Optional[RepoTotalsService] = None,
    ):
        super().__init__(client, cache)
        self.details_service = details_service or UserDetailsService(client, cache)
        self.repo_totals_service = repo_totals_service or RepoTotalsService(client, cache)

    async def rank_usernames(self, usernames: Iterable[Optional[str]]) -> List[RankedUser]:
        """
        Rank users by influence score.

        Args:
            usernames: Raw logins; blanks and duplicates are dropped

        Returns:
            RankedUser list sorted by descending score with ranks 1..N

        Raises:
            ValidationError: no usable login was supplied
        """
        logins = normalize_usernames(usernames)
        if not logins:
            raise ValidationError("No usernames supplied", "Provide usernames: string[]")

        ranked: List[RankedUser] = []
        for login in logins:
            try:
                ranked.append(await self.score_user(login))
            except GitRanksException as e:
                logger.warning(f"Ranking {login} as a zero stub: {e}")
                ranked.append(RankedUser.stub(login))
            except Exception as e:
                logger.error(f"Unexpected error ranking {login}, using a zero stub: {e}", exc_info=True)
                ranked.append(RankedUser.stub(login))

        # Stable sort keeps input order on equal scores
        ranked.sort(key=lambda user: user.score, reverse=True)
        return [
            replace(user, rank=position)
            for position, user in enumerate(ranked, start=1)
        ]

    async def score_user(self, login: str) -> RankedUser:
        """Score one user from cached components. Raises when the user cannot be resolved."""
        results = await asyncio.gather(
            self.get_user_core(login),
            self.repo_totals_service.get_totals(login),
            self.get_search_count(f"prCount:{login}", f"type:pr author:{login} is:public"),
            self.get_search_count(f"issueCount:{login}", f"type:issue author:{login} is:public"),
            return_exceptions=True,
        )
        # All four components finish before the first failure is raised
        for result in results:
            if isinstance(result, BaseException):
                raise result
        user, repo_totals, pr_count, issue_count = results
        score = InfluenceScoreCalculator.calculate(
            stars=repo_totals.stars,
            forks=repo_totals.forks,
            pr_count=pr_count,
            issue_count=issue_count,
            public_repos=user.public_repos,
            followers=user.followers,
        )
        return RankedUser(
            username=user.login,
            name=user.name,
            avatar_url=user.avatar_url,
            public_repos=user.public_repos,
            followers=user.followers,
            total_stars=repo_totals.stars,
            total_forks=repo_totals.forks,
            pr_count=pr_count,
            issue_count=issue_count,
            score=score,
        )

    async def get_user_core(self, login: str) -> UserSummary:
        """Cached user details; unknown users raise and are not cached."""
        async def _fetch() -> UserSummary:
            user = await self.details_service.fetch_one(login)
            if user.is_placeholder:
                raise UserNotFoundError(login)
            return user

        return await self.cached(f"user:{login}", CacheConstants.USER_DATA_TTL, _fetch)

    async def get_search_count(self, cache_key: str, query: str) -> int:
        """Cached issue-search total. Failures count as 0 and are not cached."""
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        try:
            count = await self.client.search_total("issues", query)
        except GitRanksException as e:
            logger.warning(f"Search count '{query}' failed, using 0: {e}")
            return 0
        self.cache.set(cache_key, count, CacheConstants.USER_DATA_TTL)
        return count
