"""Tests for leaderboard sorting, filtering and rank arithmetic."""

import pytest

from gitranks.data_models.users import LeaderboardRow, UserSummary
from gitranks.utils.ranking import RankingUtility, RowFilters


def _row(login, rank, followers=0, repos=0, contribs=None, stars=None, forks=None):
    user = UserSummary(
        login=login,
        name=None,
        avatar_url=None,
        followers=followers,
        public_repos=repos,
        html_url=f"https://github.com/{login}",
        contributions=contribs,
    )
    return LeaderboardRow(user=user, rank=rank, total_stars=stars, total_forks=forks)


@pytest.fixture
def rows():
    return [
        _row("a", 1, followers=300, repos=5, contribs=10, stars=50, forks=1),
        _row("b", 2, followers=200, repos=40, contribs=500, stars=None, forks=None),
        _row("c", 3, followers=100, repos=20, contribs=None, stars=900, forks=30),
    ]


def test_sort_by_stars_desc_puts_missing_last(rows):
    ordered = RankingUtility.sort_rows(rows, "stars", "desc")
    assert [r.user.login for r in ordered] == ["c", "a", "b"]


def test_sort_by_stars_asc_puts_missing_first(rows):
    ordered = RankingUtility.sort_rows(rows, "stars", "asc")
    assert [r.user.login for r in ordered] == ["b", "a", "c"]


def test_sort_by_public_repos_and_contribs(rows):
    assert [r.user.login for r in RankingUtility.sort_rows(rows, "publicRepos", "desc")] == ["b", "c", "a"]
    assert [r.user.login for r in RankingUtility.sort_rows(rows, "contribs", "asc")] == ["c", "a", "b"]


def test_sorting_keeps_assigned_ranks(rows):
    ordered = RankingUtility.sort_rows(rows, "stars", "desc")
    assert [r.rank for r in ordered] == [3, 1, 2]


def test_unknown_sort_falls_back_to_followers(rows):
    assert RankingUtility.normalize_sort_by("bogus") == "followers"
    ordered = RankingUtility.sort_rows(list(reversed(rows)), "bogus", "sideways")
    assert [r.user.login for r in ordered] == ["a", "b", "c"]


def test_ties_keep_input_order():
    tied = [_row(name, i + 1, followers=10) for i, name in enumerate("xyz")]
    assert [r.user.login for r in RankingUtility.sort_rows(tied, "followers", "desc")] == ["x", "y", "z"]
    assert [r.user.login for r in RankingUtility.sort_rows(tied, "followers", "asc")] == ["x", "y", "z"]


def test_filter_by_repos_followers_contribs(rows):
    kept = RankingUtility.filter_rows(rows, RowFilters(min_repos=10, min_contribs=1), include_repo_totals=False)
    assert [r.user.login for r in kept] == ["b"]

    kept = RankingUtility.filter_rows(rows, RowFilters(min_followers=150), include_repo_totals=False)
    assert [r.user.login for r in kept] == ["a", "b"]


def test_star_fork_thresholds_ignored_without_totals(rows):
    kept = RankingUtility.filter_rows(rows, RowFilters(min_stars=10_000, min_forks=10_000), include_repo_totals=False)
    assert len(kept) == 3


def test_star_fork_thresholds_with_totals(rows):
    kept = RankingUtility.filter_rows(rows, RowFilters(min_stars=40, min_forks=1), include_repo_totals=True)
    assert [r.user.login for r in kept] == ["a", "c"]


def test_page_rank():
    assert RankingUtility.page_rank(1, 100, 0) == 1
    assert RankingUtility.page_rank(2, 100, 0) == 101
    assert RankingUtility.page_rank(3, 100, 99) == 300
