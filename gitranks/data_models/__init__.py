from .users import LeaderboardPage, LeaderboardRow, RankedUser, RepoTotals, UserSummary

__all__ = ['LeaderboardPage', 'LeaderboardRow', 'RankedUser', 'RepoTotals', 'UserSummary']
