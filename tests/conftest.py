"""Shared fixtures for the GitRanks test suite."""

import pytest

from fakes import FakeClock, FakeGitHub, make_client
from gitranks.services.cache import TTLCache
from gitranks.services.github_client import GitHubClient


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def rest_client(fake_github) -> GitHubClient:
    """Client without a token: REST only."""
    return make_client(fake_github)


@pytest.fixture
def graphql_client(fake_github) -> GitHubClient:
    """Client with a token: GraphQL preferred."""
    return make_client(fake_github, token="test-token")
