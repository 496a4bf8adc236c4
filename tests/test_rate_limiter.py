"""Tests for the in-memory sliding-window limiter."""

from fakes import FakeClock, run
from gitranks.services.rate_limiter import SimpleRateLimiter


def test_allows_up_to_limit_then_blocks():
    limiter = SimpleRateLimiter(clock=FakeClock())

    async def scenario():
        return [await limiter.is_allowed("1.2.3.4", "rank", limit=3, window=60) for _ in range(4)]

    assert run(scenario()) == [True, True, True, False]


def test_window_slides():
    clock = FakeClock()
    limiter = SimpleRateLimiter(clock=clock)

    async def scenario():
        first = await limiter.is_allowed("c", "e", limit=1, window=10)
        blocked = await limiter.is_allowed("c", "e", limit=1, window=10)
        clock.advance(10)
        again = await limiter.is_allowed("c", "e", limit=1, window=10)
        return first, blocked, again

    assert run(scenario()) == (True, False, True)


def test_clients_and_endpoints_are_independent():
    limiter = SimpleRateLimiter(clock=FakeClock())

    async def scenario():
        await limiter.is_allowed("a", "rank", limit=1, window=60)
        return (
            await limiter.is_allowed("b", "rank", limit=1, window=60),
            await limiter.is_allowed("a", "leaderboard", limit=1, window=60),
            await limiter.is_allowed("a", "rank", limit=1, window=60),
        )

    assert run(scenario()) == (True, True, False)


def test_invalid_parameters_rejected_and_reset():
    limiter = SimpleRateLimiter(clock=FakeClock())

    async def scenario():
        invalid = await limiter.is_allowed("a", "e", limit=0, window=60)
        await limiter.is_allowed("a", "e", limit=1, window=60)
        limiter.reset()
        return invalid, await limiter.is_allowed("a", "e", limit=1, window=60)

    assert run(scenario()) == (False, True)


def test_idle_keys_are_swept():
    clock = FakeClock()
    limiter = SimpleRateLimiter(clock=clock)

    async def scenario():
        for client in ("a", "b", "c"):
            await limiter.is_allowed(client, "rank", limit=5, window=60)
        before = len(limiter)
        clock.advance(61)
        await limiter.is_allowed("d", "rank", limit=5, window=60)
        return before, len(limiter)

    assert run(scenario()) == (3, 1)
