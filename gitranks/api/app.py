from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from gitranks.api.routes import error_response, exception_response, router
from gitranks.config import Config
from gitranks.services.cache import TTLCache
from gitranks.services.github_client import GitHubClient
from gitranks.services.leaderboard import LeaderboardService
from gitranks.services.rate_limiter import SimpleRateLimiter
from gitranks.services.ranking import RankingService
from gitranks.services.repo_totals import RepoTotalsService
from gitranks.services.user_details import UserDetailsService
from gitranks.utils.exceptions import GitRanksException

logger = logging.getLogger(__name__)


def create_app(
    client: Optional[GitHubClient] = None,
    cache: Optional[TTLCache] = None,
    rate_limit: Optional[int] = None,
    rate_window: Optional[int] = None,
) -> FastAPI:
    """Build the API with one shared cache, client and service graph.

    A client passed in is owned by the caller and is not closed on shutdown.
    """
    owns_client = client is None
    client = client or GitHubClient(token=Config.GITHUB_TOKEN)
    cache = cache if cache is not None else TTLCache()

    details_service = UserDetailsService(client, cache)
    repo_totals_service = RepoTotalsService(client, cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        batching = "enabled" if client.has_token else "disabled, no GITHUB_TOKEN"
        logger.info(f"GitRanks API starting (GraphQL batching {batching})")
        yield
        if owns_client:
            await client.aclose()
        logger.info("GitRanks API stopped")

    app = FastAPI(title="GitRanks", lifespan=lifespan)
    app.state.cache = cache
    app.state.github_client = client
    app.state.leaderboard_service = LeaderboardService(
        client, cache,
        details_service=details_service,
        repo_totals_service=repo_totals_service,
    )
    app.state.ranking_service = RankingService(
        client, cache,
        details_service=details_service,
        repo_totals_service=repo_totals_service,
    )
    app.state.rate_limiter = SimpleRateLimiter()
    app.state.rate_limit = Config.INBOUND_RATE_LIMIT if rate_limit is None else rate_limit
    app.state.rate_window = Config.INBOUND_RATE_WINDOW if rate_window is None else rate_window

    @app.exception_handler(GitRanksException)
    async def _gitranks_exception_handler(request: Request, exc: GitRanksException):
        if exc.is_rate_limited:
            logger.warning(f"{request.method} {request.url.path} rate limited: {exc}")
        else:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return exception_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response("Provide usernames: string[]", rate_limited=False, status_code=400)

    app.include_router(router)
    return app
