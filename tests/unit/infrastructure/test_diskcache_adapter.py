"""Tests for DiskcacheAdapter (real diskcache in tmp_path)."""

from __future__ import annotations

from pathlib import Path

import pytest

from ezstremio.infrastructure.cache import DiskcacheAdapter


@pytest.fixture()
async def cache(tmp_path: Path) -> DiskcacheAdapter:
    adapter = DiskcacheAdapter(directory=tmp_path / "cache", ttl_seconds=60)
    async with adapter:
        yield adapter


class TestLifecycle:
    @pytest.mark.asyncio()
    async def test_get_before_open_raises(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path)
        with pytest.raises(RuntimeError, match="not initialized"):
            await adapter.get("k")

    @pytest.mark.asyncio()
    async def test_aclose_idempotent(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path)
        async with adapter:
            pass
        await adapter.aclose()

    @pytest.mark.asyncio()
    async def test_values_persist_across_reopen(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path) as first:
            await first.set("k", {"v": 1})
        async with DiskcacheAdapter(directory=tmp_path) as second:
            assert await second.get("k") == {"v": 1}


class TestOperations:
    @pytest.mark.asyncio()
    async def test_set_get(self, cache: DiskcacheAdapter) -> None:
        await cache.set("tmdb:details:movie:1:cs-CZ", {"title": "Wicked"})
        assert await cache.get("tmdb:details:movie:1:cs-CZ") == {"title": "Wicked"}

    @pytest.mark.asyncio()
    async def test_miss(self, cache: DiskcacheAdapter) -> None:
        assert await cache.get("missing") is None

    @pytest.mark.asyncio()
    async def test_set_overwrites(self, cache: DiskcacheAdapter) -> None:
        await cache.set("k", 1)
        await cache.set("k", 2, ttl=10)
        assert await cache.get("k") == 2

    @pytest.mark.asyncio()
    async def test_set_after_close_raises(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path)
        async with adapter:
            pass
        with pytest.raises(RuntimeError, match="not initialized"):
            await adapter.set("k", 1)
