import math
from gitranks.constants import ScoringConstants

class InfluenceScoreCalculator:
    """Handles influence score calculations for ranked users"""

    @staticmethod
    def compress_popularity(count: int) -> float:
        """
        Square-root compression for stars and forks

        Args:
            count: Raw star or fork total

        Returns:
            sqrt(count), with negative inputs treated as 0
        """
        return math.sqrt(max(count, 0))

    @staticmethod
    def compress_activity(count: int) -> float:
        """
        Log compression for PR, issue, repository and follower counts

        Args:
            count: Raw activity count

        Returns:
            log2(count + 1), so a zero count scores 0
        """
        return math.log2(max(count, 0) + 1)

    @staticmethod
    def calculate(stars: int, forks: int, pr_count: int, issue_count: int,
                  public_repos: int, followers: int) -> float:
        """
        Calculate the weighted composite score for a user

        Args:
            stars: Total stars over owned repositories
            forks: Total forks over owned repositories
            pr_count: Public pull requests authored
            issue_count: Public issues authored
            public_repos: Public repository count
            followers: Follower count

        Returns:
            Unrounded score (non-decreasing in every input)
        """
        popularity = InfluenceScoreCalculator.compress_popularity
        activity = InfluenceScoreCalculator.compress_activity
        return (
            popularity(stars) * ScoringConstants.STARS_WEIGHT
            + popularity(forks) * ScoringConstants.FORKS_WEIGHT
            + activity(pr_count) * ScoringConstants.PRS_WEIGHT
            + activity(issue_count) * ScoringConstants.ISSUES_WEIGHT
            + activity(public_repos) * ScoringConstants.REPOS_WEIGHT
            + activity(followers) * ScoringConstants.FOLLOWERS_WEIGHT
        )
