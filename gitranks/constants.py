"""
Service-wide constants for GitRanks.

This module contains all magic numbers used by the aggregation pipeline so the
upstream limits and tunables live in one place.
"""

class GitHubConstants:
    """Constants describing the upstream GitHub API."""

    ACCEPT_HEADER = "application/vnd.github+json"

    # Profile URL used for placeholder users
    PROFILE_URL_TEMPLATE = "https://github.com/{login}"

    # Search API only exposes the first 1000 results
    SEARCH_RESULT_WINDOW = 1000

    # Query for the global leaderboard
    LEADERBOARD_QUERY = "followers:>0"

    # Rate limit headers
    HEADER_REMAINING = "x-ratelimit-remaining"
    HEADER_RESET = "x-ratelimit-reset"
    HEADER_RETRY_AFTER = "retry-after"
    RATE_LIMIT_STATUSES = (403, 429)

class PaginationConstants:
    """Constants for paginated upstream and leaderboard reads."""

    # Leaderboard page size (fixed so 10 pages cover the search window)
    LEADERBOARD_PAGE_SIZE = 100

    # Repository listing per user
    REPO_PAGE_SIZE = 100
    MAX_REPO_PAGES = 5  # 500 repos, larger accounts are undercounted

    # Candidates inspected when resolving a single named user
    NAMED_SEARCH_PAGE_SIZE = 10

    # Logins per GraphQL query
    GRAPHQL_BATCH_LIMIT = 100

class CacheConstants:
    """TTLs for cached upstream data (seconds)."""

    LEADERBOARD_SEARCH_TTL = 2 * 60 * 60  # 2 hours, per page number
    NAMED_SEARCH_TTL = 5 * 60             # 5 minutes, per search term
    RANK_COUNT_TTL = 5 * 60               # 5 minutes, per count query
    USER_DATA_TTL = 6 * 60 * 60           # 6 hours, per user component

class ConcurrencyConstants:
    """Constants bounding concurrent upstream requests."""

    # REST detail fetches issued together before awaiting the batch
    REST_DETAIL_BATCH_SIZE = 5

    # Workers aggregating repo totals for a leaderboard page
    REPO_TOTALS_WORKERS = 3

class ScoringConstants:
    """Fixed weights for the influence score."""

    STARS_WEIGHT = 5.0
    FORKS_WEIGHT = 4.0
    PRS_WEIGHT = 3.0
    ISSUES_WEIGHT = 2.0
    REPOS_WEIGHT = 1.5
    FOLLOWERS_WEIGHT = 2.0

    # Decimal places exposed to callers
    SCORE_PRECISION = 2

class RankConstants:
    """Constants for global rank estimation."""

    # Conservative rank when every count query fails
    FALLBACK_RANK = 1000
