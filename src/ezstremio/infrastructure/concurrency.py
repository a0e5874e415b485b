"""Bounded fan-out executor for per-item async work.

Runs one async operation per work item with at most ``limit`` operations
in flight.  Every item is started, failures are isolated, and the call
returns only after all operations have finished:

    executor = BoundedExecutor(limit=5, name="extract")
    descriptors = await executor.run(candidates, fetch_one)

Each operation returns a list; the lists of successful operations are
concatenated into the result.  Result order follows completion order,
not input order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Iterable, TypeVar

import structlog

log = structlog.get_logger(__name__)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


class BoundedExecutor(Generic[ItemT, ResultT]):
    """Fan-out with a concurrency cap and per-item fault isolation.

    Parameters:
        limit: Max operations in flight at once (>= 1).
        name: Stage name used in log events.
    """

    def __init__(self, *, limit: int, name: str = "executor") -> None:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.limit = limit
        self.name = name

    async def run(
        self,
        items: Iterable[ItemT],
        operation: Callable[[ItemT], Awaitable[list[ResultT]]],
    ) -> list[ResultT]:
        """Run ``operation`` for every item and collect successful results.

        An operation raising ``Exception`` contributes nothing and is
        logged; its siblings keep running.  Cancellation propagates.
        """
        work = list(items)
        if not work:
            return []

        semaphore = asyncio.Semaphore(self.limit)
        buffer_lock = asyncio.Lock()
        buffer: list[ResultT] = []
        failures = 0

        async def _run_one(item: ItemT) -> None:
            nonlocal failures
            async with semaphore:
                try:
                    results = await operation(item)
                except Exception:
                    log.warning(
                        "executor_item_failed",
                        stage=self.name,
                        item=str(item),
                        exc_info=True,
                    )
                    async with buffer_lock:
                        failures += 1
                    return
            if results:
                async with buffer_lock:
                    buffer.extend(results)

        await asyncio.gather(*(_run_one(item) for item in work))

        log.debug(
            "executor_run_complete",
            stage=self.name,
            items=len(work),
            failed=failures,
            results=len(buffer),
            limit=self.limit,
        )
        return buffer
