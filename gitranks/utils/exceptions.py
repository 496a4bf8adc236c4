"""
Custom exceptions for the aggregation pipeline with user-friendly error messages.

Every exception carries an ErrorKind so the HTTP boundary can pick a status
code without inspecting message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    RATE_LIMITED = "rate_limited"
    UPSTREAM_ERROR = "upstream_error"
    VALIDATION = "validation"


class GitRanksException(Exception):
    """Base exception for GitRanks errors."""
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

    @property
    def is_rate_limited(self) -> bool:
        return self.kind is ErrorKind.RATE_LIMITED


class RateLimitError(GitRanksException):
    """Raised when GitHub reports an exhausted quota (HTTP 403/429)."""
    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        remaining: Optional[int] = None,
        reset_at: Optional[int] = None,
        retry_after: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.remaining = remaining
        self.reset_at = reset_at
        self.retry_after = retry_after
        self.url = url
        super().__init__(
            f"GitHub rate limit reached. Remaining={remaining}. Reset={reset_at}"
            + (f" ({url})" if url else ""),
            f"GitHub rate limit reached. Remaining={remaining}. "
            f"Set GITHUB_TOKEN and reload. Reset={reset_at}"
        )


class UpstreamError(GitRanksException):
    """Raised when a GitHub call fails for any reason other than rate limiting."""
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(
        self,
        status: Optional[int] = None,
        reason: str = "",
        url: str = "",
        detail: str = "",
    ):
        self.status = status
        self.reason = reason
        self.url = url
        prefix = f"{status} {reason}".strip() if status is not None else (reason or "Request failed")
        message = f"{prefix} for {url}" if url else prefix
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UserNotFoundError(UpstreamError):
    """Raised when a login does not resolve to a GitHub user."""

    def __init__(self, login: str):
        self.login = login
        super().__init__(status=404, reason="Not Found", detail=f"user '{login}' does not exist")


class ValidationError(GitRanksException):
    """Raised when a request is rejected before any network call."""
    kind = ErrorKind.VALIDATION


class InboundRateLimitError(GitRanksException):
    """Raised when a client exceeds the inbound request throttle."""
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, endpoint: str, retry_after: int):
        self.endpoint = endpoint
        self.retry_after = retry_after
        super().__init__(
            f"Inbound rate limit exceeded for {endpoint}, {retry_after}s window",
            f"Too many requests. Please wait {retry_after} seconds before trying again."
        )
