from __future__ import annotations

import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from gitranks.api.schemas import RankRequest
from gitranks.services.rate_limiter import rate_limit
from gitranks.utils.exceptions import ErrorKind, GitRanksException, InboundRateLimitError, RateLimitError
from gitranks.utils.ranking import RowFilters

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.UPSTREAM_ERROR: 500,
}


def _parse_int(value: Optional[str], default: int = 0) -> int:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _parse_flag(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes"}


def error_response(message: str, rate_limited: bool, status_code: int, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "rateLimited": rate_limited},
        headers=headers,
    )


def exception_response(exc: GitRanksException) -> JSONResponse:
    """Map a tagged exception onto the public error shape."""
    headers = None
    retry_after: Optional[int] = None
    if isinstance(exc, RateLimitError):
        retry_after = exc.retry_after
        if retry_after is None and exc.reset_at is not None:
            retry_after = max(0, exc.reset_at - int(time.time()))
    elif isinstance(exc, InboundRateLimitError):
        retry_after = exc.retry_after
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}

    return error_response(
        exc.user_message,
        rate_limited=exc.is_rate_limited,
        status_code=_STATUS_BY_KIND.get(exc.kind, 500),
        headers=headers,
    )


@router.get("/api/leaderboard", dependencies=[Depends(rate_limit("leaderboard"))])
async def api_leaderboard(
    request: Request,
    page: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = None,
    include_repo_totals: Optional[str] = Query(None, alias="includeRepoTotals"),
    min_repos: Optional[str] = Query(None, alias="minRepos"),
    min_followers: Optional[str] = Query(None, alias="minFollowers"),
    min_contribs: Optional[str] = Query(None, alias="minContribs"),
    min_stars: Optional[str] = Query(None, alias="minStars"),
    min_forks: Optional[str] = Query(None, alias="minForks"),
    search: Optional[str] = None,
) -> Any:
    service = request.app.state.leaderboard_service
    filters = RowFilters(
        min_repos=_parse_int(min_repos),
        min_followers=_parse_int(min_followers),
        min_contribs=_parse_int(min_contribs),
        min_stars=_parse_int(min_stars),
        min_forks=_parse_int(min_forks),
    )
    try:
        result = await service.get_page(
            page=max(1, _parse_int(page, 1)),
            sort_by=sort_by or "followers",
            order=order or "desc",
            include_repo_totals=_parse_flag(include_repo_totals),
            filters=filters,
            search=search,
        )
    except GitRanksException:
        raise
    except Exception as e:
        logger.error(f"Error in leaderboard endpoint: {e}", exc_info=True)
        return error_response(str(e), rate_limited=False, status_code=500)
    return result.to_dict()


@router.post("/api/rank", dependencies=[Depends(rate_limit("rank"))])
async def api_rank(request: Request, body: RankRequest) -> Any:
    service = request.app.state.ranking_service
    try:
        ranked = await service.rank_usernames(body.usernames)
    except GitRanksException:
        raise
    except Exception as e:
        logger.error(f"Error in rank endpoint: {e}", exc_info=True)
        return error_response(str(e), rate_limited=False, status_code=500)
    return {"results": [user.to_dict() for user in ranked]}


@router.get("/api/health")
async def api_health(request: Request) -> Any:
    client = request.app.state.github_client
    return {
        "status": "ok",
        "tokenConfigured": client.has_token,
        "cacheEntries": len(request.app.state.cache),
        "rateLimit": await client.rate_limit_status(),
    }
