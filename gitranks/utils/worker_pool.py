"""
Fixed-size async worker pool.

Workers drain a shared queue until it is empty. Each item is processed once;
failures are logged and the item is left out of the result map, so callers
apply their own defaults.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable, Iterable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


async def run_worker_pool(
    items: Iterable[K],
    worker: Callable[[K], Awaitable[V]],
    concurrency: int,
) -> Dict[K, V]:
    """
    Run ``worker`` over ``items`` with at most ``concurrency`` jobs in flight.

    Args:
        items: Work items; duplicates are processed once per occurrence
        worker: Coroutine function producing a result per item
        concurrency: Number of workers

    Returns:
        Mapping of item to result for every job that succeeded
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    queue: "asyncio.Queue[K]" = asyncio.Queue()
    for item in items:
        queue.put_nowait(item)

    results: Dict[K, V] = {}

    async def _drain(worker_id: int):
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results[item] = await worker(item)
            except Exception as e:
                logger.warning(f"Worker {worker_id} failed on {item!r}: {e}")

    worker_count = min(concurrency, queue.qsize()) or 1
    await asyncio.gather(*(_drain(i) for i in range(worker_count)))
    return results
