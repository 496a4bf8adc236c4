"""Tests for the fixed-size async worker pool."""

import asyncio

import pytest

from fakes import run
from gitranks.utils.worker_pool import run_worker_pool


def test_processes_every_item_once():
    seen = []

    async def worker(item):
        seen.append(item)
        await asyncio.sleep(0)
        return item * 2

    results = run(run_worker_pool(range(10), worker, concurrency=3))
    assert results == {i: i * 2 for i in range(10)}
    assert sorted(seen) == list(range(10))


def test_concurrency_is_bounded():
    in_flight = 0
    peak = 0

    async def worker(item):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1
        return item

    run(run_worker_pool(range(12), worker, concurrency=3))
    assert peak == 3


def test_failed_items_are_omitted():
    async def worker(item):
        if item == "bad":
            raise RuntimeError("nope")
        return item.upper()

    results = run(run_worker_pool(["a", "bad", "c"], worker, concurrency=2))
    assert results == {"a": "A", "c": "C"}


def test_empty_input():
    async def worker(item):
        raise AssertionError("should not run")

    assert run(run_worker_pool([], worker, concurrency=3)) == {}


def test_rejects_zero_concurrency():
    async def worker(item):
        return item

    with pytest.raises(ValueError):
        run(run_worker_pool([1], worker, concurrency=0))
