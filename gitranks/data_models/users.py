"""
User data models for the leaderboard and ranking views.

Provides immutable data transfer objects for GitHub user aggregation. Each
record serialises itself to the camelCase shape served over HTTP.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from gitranks.constants import GitHubConstants, ScoringConstants


@dataclass(frozen=True)
class UserSummary:
    """Canonical per-user record built by either transport.

    ``contributions`` is only known to the GraphQL transport; the REST
    fallback leaves it at 0.
    """
    login: str
    name: Optional[str]
    avatar_url: Optional[str]
    followers: int
    public_repos: int
    html_url: str
    contributions: Optional[int] = None
    is_placeholder: bool = False

    @classmethod
    def placeholder(cls, login: str) -> "UserSummary":
        """Zero-valued record derived purely from the login."""
        return cls(
            login=login,
            name=None,
            avatar_url=None,
            followers=0,
            public_repos=0,
            html_url=GitHubConstants.PROFILE_URL_TEMPLATE.format(login=login),
            contributions=0,
            is_placeholder=True,
        )


@dataclass(frozen=True)
class RepoTotals:
    """Summed stars and forks over a user's owned repositories."""
    stars: int = 0
    forks: int = 0


@dataclass(frozen=True)
class LeaderboardRow:
    """Single leaderboard row."""
    user: UserSummary
    rank: int
    total_stars: Optional[int] = None
    total_forks: Optional[int] = None

    @property
    def contributions(self) -> Optional[int]:
        return self.user.contributions

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'username': self.user.login,
            'name': self.user.name,
            'avatarUrl': self.user.avatar_url,
            'followers': self.user.followers,
            'publicRepos': self.user.public_repos,
            'contributions': self.user.contributions,
            'totalStars': self.total_stars,
            'totalForks': self.total_forks,
            'htmlUrl': self.user.html_url,
            'rank': self.rank,
        }
        # Optional metrics are omitted rather than sent as null
        for key in ('contributions', 'totalStars', 'totalForks'):
            if data[key] is None:
                del data[key]
        return data


@dataclass(frozen=True)
class LeaderboardPage:
    """Paginated leaderboard data."""
    page: int
    per_page: int
    total: int
    has_next: bool
    has_prev: bool
    users: List[LeaderboardRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'perPage': self.per_page,
            'total': self.total,
            'hasNext': self.has_next,
            'hasPrev': self.has_prev,
            'users': [row.to_dict() for row in self.users],
        }


@dataclass(frozen=True)
class RankedUser:
    """Scored user for the multi-user ranking. ``score`` is kept unrounded."""
    username: str
    name: Optional[str]
    avatar_url: Optional[str]
    public_repos: int
    followers: int
    total_stars: int
    total_forks: int
    pr_count: int
    issue_count: int
    score: float
    rank: int = 0

    @classmethod
    def stub(cls, username: str) -> "RankedUser":
        """Zero-score entry used when a user could not be ranked."""
        return cls(
            username=username,
            name=None,
            avatar_url=None,
            public_repos=0,
            followers=0,
            total_stars=0,
            total_forks=0,
            pr_count=0,
            issue_count=0,
            score=0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'username': self.username,
            'name': self.name,
            'avatarUrl': self.avatar_url,
            'publicRepos': self.public_repos,
            'followers': self.followers,
            'totalStars': self.total_stars,
            'totalForks': self.total_forks,
            'prCount': self.pr_count,
            'issueCount': self.issue_count,
            'score': round(self.score, ScoringConstants.SCORE_PRECISION),
            'rank': self.rank,
        }
