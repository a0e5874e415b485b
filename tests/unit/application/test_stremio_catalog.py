"""Tests for StremioCatalogUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ezstremio.application.use_cases.stremio_catalog import (
    StremioCatalogUseCase,
    skip_to_page,
)
from ezstremio.domain.entities.stremio import StremioMeta, StremioMetaPreview


class TestSkipToPage:
    @pytest.mark.parametrize(
        ("skip", "page"),
        [(0, 1), (19, 1), (20, 2), (39, 2), (40, 3), (-5, 1)],
    )
    def test_mapping(self, skip: int, page: int) -> None:
        assert skip_to_page(skip) == page


class TestCatalog:
    @pytest.mark.asyncio()
    async def test_popular(self) -> None:
        previews = [StremioMetaPreview(id="eztmdb:1", type="movie", name="Wicked")]
        metadata = AsyncMock()
        metadata.catalog = AsyncMock(return_value=previews)

        result = await StremioCatalogUseCase(metadata).catalog("movie", skip=40)

        assert result == previews
        metadata.catalog.assert_awaited_once_with("movie", page=3, query=None)

    @pytest.mark.asyncio()
    async def test_search_query_stripped(self) -> None:
        metadata = AsyncMock()
        metadata.catalog = AsyncMock(return_value=[])

        await StremioCatalogUseCase(metadata).catalog("series", query="  Dark ")

        metadata.catalog.assert_awaited_once_with("series", page=1, query="Dark")

    @pytest.mark.asyncio()
    async def test_blank_query_is_popular(self) -> None:
        metadata = AsyncMock()
        metadata.catalog = AsyncMock(return_value=[])

        await StremioCatalogUseCase(metadata).catalog("movie", query="   ")

        metadata.catalog.assert_awaited_once_with("movie", page=1, query=None)

    @pytest.mark.asyncio()
    async def test_error_gives_empty_list(self) -> None:
        metadata = AsyncMock()
        metadata.catalog = AsyncMock(side_effect=RuntimeError("boom"))

        assert await StremioCatalogUseCase(metadata).catalog("movie") == []


class TestMeta:
    @pytest.mark.asyncio()
    async def test_meta(self) -> None:
        meta = StremioMeta(id="eztmdb:1", type="movie", name="Wicked")
        metadata = AsyncMock()
        metadata.get_meta = AsyncMock(return_value=meta)

        assert await StremioCatalogUseCase(metadata).meta(1, "movie") == meta
        metadata.get_meta.assert_awaited_once_with(1, "movie")

    @pytest.mark.asyncio()
    async def test_error_gives_none(self) -> None:
        metadata = AsyncMock()
        metadata.get_meta = AsyncMock(side_effect=RuntimeError("boom"))

        assert await StremioCatalogUseCase(metadata).meta(1, "series") is None
