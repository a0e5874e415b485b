"""Tests for BoundedExecutor: concurrency cap, fault isolation, join."""

from __future__ import annotations

import asyncio

import pytest

from ezstremio.infrastructure.concurrency import BoundedExecutor


class _InFlightCounter:
    """Instrumented operation recording the peak number of concurrent calls."""

    def __init__(self, delay: float = 0.01) -> None:
        self.delay = delay
        self.current = 0
        self.peak = 0
        self.calls: list[int] = []

    async def __call__(self, item: int) -> list[int]:
        self.current += 1
        self.peak = max(self.peak, self.current)
        self.calls.append(item)
        try:
            await asyncio.sleep(self.delay)
            return [item * 10]
        finally:
            self.current -= 1


class TestInit:
    def test_rejects_zero_limit(self) -> None:
        with pytest.raises(ValueError, match="limit must be >= 1"):
            BoundedExecutor(limit=0)

    def test_rejects_negative_limit(self) -> None:
        with pytest.raises(ValueError):
            BoundedExecutor(limit=-3)


class TestRun:
    @pytest.mark.asyncio()
    async def test_never_exceeds_cap(self) -> None:
        op = _InFlightCounter()
        executor: BoundedExecutor[int, int] = BoundedExecutor(limit=2)

        results = await executor.run(range(10), op)

        assert op.peak == 2
        assert sorted(results) == [i * 10 for i in range(10)]
        assert sorted(op.calls) == list(range(10))

    @pytest.mark.asyncio()
    async def test_cap_of_one_is_sequential(self) -> None:
        op = _InFlightCounter()
        await BoundedExecutor(limit=1).run(range(5), op)
        assert op.peak == 1
        assert op.calls == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio()
    async def test_cap_above_item_count(self) -> None:
        op = _InFlightCounter()
        await BoundedExecutor(limit=50).run(range(4), op)
        assert op.peak == 4

    @pytest.mark.asyncio()
    async def test_empty_input(self) -> None:
        op = _InFlightCounter()
        assert await BoundedExecutor(limit=3).run([], op) == []
        assert op.calls == []

    @pytest.mark.asyncio()
    async def test_failure_is_isolated(self) -> None:
        async def op(item: str) -> list[str]:
            await asyncio.sleep(0)
            if item == "bad":
                raise RuntimeError("boom")
            return [item.upper()]

        results = await BoundedExecutor(limit=2).run(["a", "bad", "b"], op)

        assert sorted(results) == ["A", "B"]

    @pytest.mark.asyncio()
    async def test_all_failures_give_empty_result(self) -> None:
        async def op(item: int) -> list[int]:
            raise ValueError(item)

        assert await BoundedExecutor(limit=3).run([1, 2, 3], op) == []

    @pytest.mark.asyncio()
    async def test_waits_for_slow_operations(self) -> None:
        finished: list[str] = []

        async def op(item: str) -> list[str]:
            await asyncio.sleep(0.05 if item == "slow" else 0)
            finished.append(item)
            return [item]

        results = await BoundedExecutor(limit=2).run(["slow", "fast"], op)

        assert sorted(results) == ["fast", "slow"]
        assert finished == ["fast", "slow"]

    @pytest.mark.asyncio()
    async def test_operations_returning_several_results(self) -> None:
        async def op(item: int) -> list[int]:
            return [item] * item

        results = await BoundedExecutor(limit=2).run([1, 2, 3], op)
        assert sorted(results) == [1, 2, 2, 3, 3, 3]

    @pytest.mark.asyncio()
    async def test_executor_reusable(self) -> None:
        executor = BoundedExecutor(limit=2)
        op = _InFlightCounter()
        first = await executor.run([1, 2], op)
        second = await executor.run([3], op)
        assert sorted(first) == [10, 20]
        assert second == [30]
