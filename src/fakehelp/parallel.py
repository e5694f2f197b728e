"""Best-effort bounded-concurrency batch execution.

A fixed pool of worker tasks drains a queue of inputs. Each worker records
its outcome; once the queue is empty the partial-success policy decides the
result: any success wins, total failure raises the first error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def execute_in_parallel(
    items: Iterable[T],
    concurrency: int,
    operation: Callable[[T], Awaitable[R]],
) -> list[R]:
    """Run *operation* over *items* with at most *concurrency* in flight.

    Parameters
    ----------
    items
        Inputs; each one is attempted exactly once.
    concurrency
        Maximum number of concurrently running operations (>= 1).
    operation
        Coroutine function applied to every item. It owns its own
        timeout, if any; a raised ``TimeoutError`` counts as a failure.

    Returns
    -------
    list
        Successful results in completion order.

    Raises
    ------
    ValueError
        If *concurrency* is lower than 1.
    Exception
        The first recorded failure, when no item succeeded.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    queue: asyncio.Queue[T] = asyncio.Queue()
    for item in items:
        queue.put_nowait(item)
    if queue.empty():
        return []

    results: list[R] = []
    errors: list[Exception] = []

    async def _worker() -> None:
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results.append(await operation(item))
            except Exception as exc:  # noqa: BLE001
                _logger.debug("Batch item %r failed: %s", item, exc)
                errors.append(exc)

    workers = [asyncio.create_task(_worker()) for _ in range(min(concurrency, queue.qsize()))]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for worker in workers:
            worker.cancel()
        raise

    if not results and errors:
        raise errors[0]
    if errors:
        _logger.debug("Batch finished with %d successes and %d failures", len(results), len(errors))
    return results
