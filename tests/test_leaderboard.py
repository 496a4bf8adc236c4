"""Tests for leaderboard page assembly and named-user lookups."""

import httpx
import pytest

from fakes import run
from gitranks.services.leaderboard import LeaderboardService
from gitranks.utils.exceptions import RateLimitError, UpstreamError
from gitranks.utils.ranking import RowFilters


def _seed_leaderboard(fake_github, count, total=None):
    for i in range(count):
        login = f"dev{i:03d}"
        fake_github.add_user(
            login,
            followers=10_000 - i,
            public_repos=i % 7,
            contributions=i,
            repos=[(i, i % 3)],
        )
        fake_github.leaderboard.append(login)
    fake_github.leaderboard_total = total


def test_first_page_ranks_and_shape(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 250)
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(page=1))

    assert page.total == 250
    assert page.has_next is True
    assert page.has_prev is False
    assert len(page.users) == 100
    assert [row.rank for row in page.users] == list(range(1, 101))
    first = page.to_dict()["users"][0]
    assert first["username"] == "dev000"
    assert first["htmlUrl"] == "https://github.com/dev000"
    assert "totalStars" not in first

    search = fake_github.requests_to("/search/users")[0]
    assert search.url.params["q"] == "followers:>0"
    assert search.url.params["sort"] == "followers"
    assert search.url.params["order"] == "desc"
    assert search.url.params["per_page"] == "100"


def test_second_page_ranks(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 250)
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(page=2))

    assert page.has_prev is True
    assert page.has_next is True
    assert page.users[0].rank == 101
    assert page.users[-1].rank == 200


def test_total_capped_at_search_window(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 100, total=5_000_000)
    service = LeaderboardService(graphql_client, cache)

    first = run(service.get_page(page=1))
    last = run(service.get_page(page=10))

    assert first.total == 1000
    assert last.has_next is False


def test_search_result_is_cached(fake_github, cache, clock, graphql_client):
    _seed_leaderboard(fake_github, 10)
    service = LeaderboardService(graphql_client, cache)

    run(service.get_page(page=1))
    run(service.get_page(page=1))
    assert len(fake_github.requests_to("/search/users")) == 1

    clock.advance(2 * 3600 + 1)
    run(service.get_page(page=1))
    assert len(fake_github.requests_to("/search/users")) == 2


def test_sort_keeps_pre_sort_ranks(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 5)
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(page=1, sort_by="contribs", order="desc"))

    assert [row.user.login for row in page.users] == ["dev004", "dev003", "dev002", "dev001", "dev000"]
    assert [row.rank for row in page.users] == [5, 4, 3, 2, 1]


def test_repo_totals_and_filters(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 6)
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(
        page=1,
        include_repo_totals=True,
        filters=RowFilters(min_stars=3),
        sort_by="stars",
        order="asc",
    ))

    assert [row.user.login for row in page.users] == ["dev003", "dev004", "dev005"]
    assert page.users[0].to_dict()["totalStars"] == 3
    assert page.users[0].to_dict()["totalForks"] == 0
    # Filtering never changes the reported total
    assert page.total == 6


def test_failed_repo_totals_default_to_zero(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 2)
    fake_github.overrides["/users/dev001/repos"] = lambda request: httpx.Response(500)
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(page=1, include_repo_totals=True))

    assert page.users[1].total_stars == 0
    assert page.users[1].total_forks == 0


def test_duplicate_search_items_are_collapsed(fake_github, cache, graphql_client):
    _seed_leaderboard(fake_github, 3)
    fake_github.leaderboard.append("dev000")
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(page=1))

    assert [row.user.login for row in page.users] == ["dev000", "dev001", "dev002"]


def test_search_failure_propagates(fake_github, cache, graphql_client):
    fake_github.overrides["/search/users"] = lambda request: httpx.Response(503)
    service = LeaderboardService(graphql_client, cache)
    with pytest.raises(UpstreamError):
        run(service.get_page(page=1))


def test_rest_rate_limit_propagates(fake_github, cache, rest_client):
    _seed_leaderboard(fake_github, 3)
    fake_github.overrides["/users/dev002"] = lambda request: httpx.Response(403)
    service = LeaderboardService(rest_client, cache)
    with pytest.raises(RateLimitError):
        run(service.get_page(page=1))


def test_named_user_exact_match(fake_github, cache, graphql_client):
    fake_github.add_user("torvaldsfan", followers=3)
    fake_github.add_user("Torvalds", followers=200_000, repos=[(100, 50)])
    fake_github.counts["followers:>200000"] = 2
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(search="  torvalds ", include_repo_totals=True))

    assert page.to_dict()["perPage"] == 1
    assert page.total == 1
    assert page.has_next is False and page.has_prev is False
    (row,) = page.users
    assert row.user.login == "Torvalds"
    assert row.rank == 3
    assert row.total_stars == 100
    search = fake_github.requests_to("/search/users")[0]
    assert search.url.params["q"] == "torvalds in:login"


def test_named_user_no_match(fake_github, cache, graphql_client):
    service = LeaderboardService(graphql_client, cache)

    page = run(service.get_page(search="nobody-here"))

    assert page.total == 0
    assert page.users == []
    assert page.page == 1


def test_named_user_search_is_cached(fake_github, cache, graphql_client):
    fake_github.add_user("alice", followers=0)
    fake_github.counts["followers:>0"] = 10
    service = LeaderboardService(graphql_client, cache)

    first = run(service.get_page(search="Alice"))
    run(service.get_page(search="ALICE"))

    assert first.users[0].rank == 11
    searches = [r for r in fake_github.requests_to("/search/users") if r.url.params["q"].endswith("in:login")]
    assert len(searches) == 1
