# app/core/concurrency/runner.py
from __future__ import annotations
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, Set, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def run_bounded(
    items: Sequence[T],
    worker: Callable[[T, int], Awaitable[R]],
    limit: int,
) -> List[R]:
    """
    Run ``worker(item, index)`` for every item with at most ``limit`` calls
    in flight, and return the outputs aligned with ``items``.

    The runner does not look at outcomes: workers are expected to catch their
    own failures and encode them in the returned value. If a worker raises
    anyway, the remaining in-flight tasks are cancelled and the error
    propagates.
    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be >= 1, got {limit}")

    results: List[Optional[R]] = [None] * len(items)
    if not items:
        return []

    async def _slot(item: T, index: int) -> None:
        results[index] = await worker(item, index)

    in_flight: Set[asyncio.Task] = set()

    try:
        for index, item in enumerate(items):
            if len(in_flight) >= limit:
                done, in_flight = await asyncio.wait(
                    in_flight, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    task.result()
            in_flight.add(asyncio.create_task(_slot(item, index)))

        if in_flight:
            done, _ = await asyncio.wait(in_flight)
            in_flight = set()
            for task in done:
                task.result()
    finally:
        for task in in_flight:
            task.cancel()

    return results
