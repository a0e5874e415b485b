"""Port for the metadata provider (TMDB)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ezstremio.domain.entities.media import TitleContext
from ezstremio.domain.entities.stremio import (
    StremioContentType,
    StremioMeta,
    StremioMetaPreview,
)


@runtime_checkable
class MetadataClientPort(Protocol):
    """Async interface for metadata lookups (Czech locale)."""

    async def get_title_context(
        self,
        tmdb_id: int,
        content_type: StremioContentType,
        season: int | None = None,
        episode: int | None = None,
    ) -> TitleContext | None:
        """Localized name, original name and year, or None if unknown."""
        ...

    async def get_meta(
        self, tmdb_id: int, content_type: StremioContentType
    ) -> StremioMeta | None:
        """Full meta object including the episode list for series."""
        ...

    async def catalog(
        self,
        content_type: StremioContentType,
        page: int = 1,
        query: str | None = None,
    ) -> list[StremioMetaPreview]:
        """Popular titles, or search results when ``query`` is given."""
        ...
