"""GitRanks: GitHub developer leaderboard and influence ranking."""

__version__ = "0.1.0"
