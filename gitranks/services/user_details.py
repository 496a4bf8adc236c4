"""
Bulk user detail fetching.

Prefers one GraphQL query for the whole set. Without a token, or when GraphQL
fails, falls back to REST ``/users/{login}`` calls issued in small concurrent
batches. Output always has one record per input login, in input order.
"""

import asyncio
from typing import List
from urllib.parse import quote

from gitranks.constants import ConcurrencyConstants
from gitranks.data_models.users import UserSummary
from gitranks.services.base import BaseService
from gitranks.services.github_client import coerce_count
from gitranks.utils.exceptions import RateLimitError, UpstreamError
from gitranks.utils.logger import setup_logger

logger = setup_logger(__name__)


class UserDetailsService(BaseService):
    """Service resolving logins to UserSummary records."""

    async def fetch_many(self, logins: List[str]) -> List[UserSummary]:
        """
        Fetch details for every login, preserving order.

        Args:
            logins: Unique GitHub logins

        Returns:
            One UserSummary per login; unresolvable logins get a placeholder

        Raises:
            RateLimitError: REST fallback hit an exhausted quota
        """
        if not logins:
            return []

        details = await self.client.fetch_users_graphql(logins)
        if details is not None:
            logger.info(f"Fetched {len(details)} users via GraphQL")
            return details

        logger.info(f"GraphQL unavailable, fetching {len(logins)} users via REST")
        return await self._fetch_rest(logins)

    async def fetch_one(self, login: str) -> UserSummary:
        """Fetch a single user through the same transport preference."""
        return (await self.fetch_many([login]))[0]

    async def _fetch_rest(self, logins: List[str]) -> List[UserSummary]:
        batch_size = ConcurrencyConstants.REST_DETAIL_BATCH_SIZE
        details: List[UserSummary] = []
        for start in range(0, len(logins), batch_size):
            batch = logins[start:start + batch_size]
            # A RateLimitError from any call aborts the remaining batches
            details.extend(await asyncio.gather(*(self._fetch_rest_user(login) for login in batch)))
        return details

    async def _fetch_rest_user(self, login: str) -> UserSummary:
        try:
            data = await self.client.get_json(f"/users/{quote(login, safe='')}")
        except RateLimitError:
            raise
        except UpstreamError as e:
            logger.warning(f"Using placeholder for {login}: {e}")
            return UserSummary.placeholder(login)

        if not isinstance(data, dict) or not data.get("login"):
            logger.warning(f"Using placeholder for {login}: unexpected user payload")
            return UserSummary.placeholder(login)

        return UserSummary(
            login=data["login"],
            name=data.get("name"),
            avatar_url=data.get("avatar_url"),
            followers=coerce_count(data.get("followers")),
            public_repos=coerce_count(data.get("public_repos")),
            html_url=data.get("html_url") or UserSummary.placeholder(login).html_url,
            contributions=0,
        )
