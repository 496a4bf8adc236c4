"""
Async GitHub API client with REST and GraphQL transports.

The REST transport raises: RateLimitError on HTTP 403/429, UpstreamError on
any other failure. The GraphQL transport never raises; it returns None when it
is unavailable (no token, bad status, network error, malformed or errored
response) and callers fall back to REST.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from gitranks.config import Config
from gitranks.constants import GitHubConstants, PaginationConstants
from gitranks.data_models.users import UserSummary
from gitranks.utils.exceptions import RateLimitError, UpstreamError

logger = logging.getLogger(__name__)

_GRAPHQL_USER_FIELDS = (
    "login name avatarUrl url "
    "followers { totalCount } "
    "repositories(privacy: PUBLIC) { totalCount } "
    "contributionsCollection { contributionCalendar { totalContributions } }"
)


def _header_int(headers: httpx.Headers, name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def coerce_count(value: Any) -> int:
    """Coerce an upstream numeric field to a non-negative int."""
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


class GitHubClient:
    """Thin wrapper over one httpx.AsyncClient shared by every service."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        graphql_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.graphql_url = graphql_url or Config.GITHUB_GRAPHQL_URL
        headers = {
            "Accept": GitHubConstants.ACCEPT_HEADER,
            "User-Agent": user_agent or Config.USER_AGENT,
            # Caching is done by TTLCache, never by intermediaries
            "Cache-Control": "no-cache",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or Config.GITHUB_API_URL,
            headers=headers,
            timeout=timeout if timeout is not None else Config.REQUEST_TIMEOUT,
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    # ------------------------------------------------------------------
    # REST transport
    # ------------------------------------------------------------------

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Issue a request, wrapping network failures in UpstreamError."""
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamError(
                reason=type(e).__name__,
                url=str(self._client.base_url.join(url)),
                detail=str(e),
            ) from e

    @staticmethod
    def raise_for_status(response: httpx.Response):
        """Raise the error matching a non-success response."""
        if response.status_code in GitHubConstants.RATE_LIMIT_STATUSES:
            raise RateLimitError(
                remaining=_header_int(response.headers, GitHubConstants.HEADER_REMAINING),
                reset_at=_header_int(response.headers, GitHubConstants.HEADER_RESET),
                retry_after=_header_int(response.headers, GitHubConstants.HEADER_RETRY_AFTER),
                url=str(response.request.url),
            )
        if not response.is_success:
            raise UpstreamError(
                status=response.status_code,
                reason=response.reason_phrase,
                url=str(response.request.url),
                detail=response.text[:200],
            )

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a REST resource and decode its JSON body."""
        response = await self.request("GET", path, params=params)
        self.raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                status=response.status_code,
                reason="Malformed JSON",
                url=str(response.request.url),
            ) from e

    async def search_users(
        self,
        q: str,
        page: int = 1,
        per_page: int = 30,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run a user search and return ``{total_count, items}``."""
        params: Dict[str, Any] = {"q": q, "per_page": per_page, "page": page}
        if sort:
            params["sort"] = sort
        if order:
            params["order"] = order
        data = await self.get_json("/search/users", params=params)
        if not isinstance(data, dict):
            raise UpstreamError(reason="Unexpected search payload", url="/search/users")
        return {
            "total_count": coerce_count(data.get("total_count")),
            "items": [item for item in data.get("items") or [] if isinstance(item, dict)],
        }

    async def search_total(self, endpoint: str, q: str) -> int:
        """Return ``total_count`` for a search (``users`` or ``issues``)."""
        data = await self.get_json(f"/search/{endpoint}", params={"q": q, "per_page": 1})
        if not isinstance(data, dict):
            raise UpstreamError(reason="Unexpected search payload", url=f"/search/{endpoint}")
        return coerce_count(data.get("total_count"))

    async def rate_limit_status(self) -> Optional[Dict[str, int]]:
        """Current core quota, or None when GitHub cannot be reached."""
        try:
            data = await self.get_json("/rate_limit")
            core = data["resources"]["core"]
            return {
                "limit": coerce_count(core.get("limit")),
                "remaining": coerce_count(core.get("remaining")),
                "reset": coerce_count(core.get("reset")),
            }
        except (UpstreamError, RateLimitError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Could not read GitHub rate limit status: {e}")
            return None

    # ------------------------------------------------------------------
    # GraphQL transport
    # ------------------------------------------------------------------

    async def graphql(self, query: str) -> Optional[Dict[str, Any]]:
        """Run a GraphQL query; None means the transport is unavailable."""
        if not self.token:
            return None
        try:
            response = await self._client.post(self.graphql_url, json={"query": query})
        except httpx.HTTPError as e:
            logger.warning(f"GraphQL request failed: {e}")
            return None
        if not response.is_success:
            logger.warning(f"GraphQL returned {response.status_code} {response.reason_phrase}")
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("GraphQL returned a malformed body")
            return None
        if not isinstance(payload, dict) or payload.get("errors") or not isinstance(payload.get("data"), dict):
            logger.warning("GraphQL response carried errors or no data")
            return None
        return payload["data"]

    async def fetch_users_graphql(self, logins: List[str]) -> Optional[List[UserSummary]]:
        """Fetch many users with aliased GraphQL queries, preserving input order.

        Unresolved logins become placeholders. Returns None when any chunk is
        unavailable so the caller can switch transports for the whole set.
        """
        if not self.token:
            return None

        results: List[UserSummary] = []
        batch_limit = PaginationConstants.GRAPHQL_BATCH_LIMIT
        for start in range(0, len(logins), batch_limit):
            chunk = logins[start:start + batch_limit]
            fields = " ".join(
                f'u{i}: user(login: "{login.replace(chr(34), "")}") {{ {_GRAPHQL_USER_FIELDS} }}'
                for i, login in enumerate(chunk)
            )
            data = await self.graphql(f"{{ {fields} }}")
            if data is None:
                return None
            for i, login in enumerate(chunk):
                node = data.get(f"u{i}")
                if isinstance(node, dict) and node.get("login"):
                    results.append(UserSummary(
                        login=node["login"],
                        name=node.get("name"),
                        avatar_url=node.get("avatarUrl"),
                        followers=coerce_count((node.get("followers") or {}).get("totalCount")),
                        public_repos=coerce_count((node.get("repositories") or {}).get("totalCount")),
                        contributions=coerce_count(
                            ((node.get("contributionsCollection") or {})
                             .get("contributionCalendar") or {})
                            .get("totalContributions")
                        ),
                        html_url=node.get("url") or GitHubConstants.PROFILE_URL_TEMPLATE.format(login=login),
                    ))
                else:
                    results.append(UserSummary.placeholder(login))
        return results
