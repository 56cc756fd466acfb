import asyncio

import pytest

from app.core.concurrency.runner import run_bounded


class Tracker:
    def __init__(self):
        self.active = 0
        self.peak = 0

    async def work(self, item, index):
        self.active += 1
        self.peak = max(self.peak, self.active)
        # finish out of order to make sure results are placed by index
        await asyncio.sleep(0.001 * ((index * 7) % 5))
        self.active -= 1
        return item * 10


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 3, 5, 50])
async def test_never_exceeds_limit_and_keeps_order(limit):
    tracker = Tracker()
    items = list(range(20))

    results = await run_bounded(items, tracker.work, limit)

    assert results == [i * 10 for i in items]
    assert tracker.peak <= limit
    assert tracker.peak == min(limit, len(items))


@pytest.mark.asyncio
async def test_worker_receives_item_and_index():
    seen = []

    async def work(item, index):
        seen.append((item, index))
        return index

    results = await run_bounded(["a", "b", "c"], work, 2)

    assert results == [0, 1, 2]
    assert sorted(seen) == [("a", 0), ("b", 1), ("c", 2)]


@pytest.mark.asyncio
async def test_empty_input_returns_empty_list():
    called = False

    async def work(item, index):
        nonlocal called
        called = True

    assert await run_bounded([], work, 3) == []
    assert called is False


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1])
async def test_rejects_non_positive_limit(limit):
    async def work(item, index):
        return item

    with pytest.raises(ValueError):
        await run_bounded([1, 2], work, limit)


@pytest.mark.asyncio
async def test_worker_error_propagates():
    async def work(item, index):
        if index == 1:
            raise RuntimeError("boom")
        return item

    with pytest.raises(RuntimeError, match="boom"):
        await run_bounded([1, 2, 3], work, 1)
