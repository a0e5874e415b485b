"""Stremio catalog and meta use case, backed by TMDB."""

from __future__ import annotations

import structlog

from ezstremio.domain.entities.stremio import (
    StremioContentType,
    StremioMeta,
    StremioMetaPreview,
)
from ezstremio.domain.ports.metadata import MetadataClientPort

log = structlog.get_logger(__name__)

# Stremio pages catalogs by item offset, TMDB by page of 20.
TMDB_PAGE_SIZE = 20


def skip_to_page(skip: int) -> int:
    """Stremio ``skip`` offset -> 1-based TMDB page."""
    return max(skip, 0) // TMDB_PAGE_SIZE + 1


class StremioCatalogUseCase:
    """Provides Stremio catalog and meta data backed by TMDB.

    Delegates all API/cache logic to the injected MetadataClientPort.
    The use case is responsible for error handling: every failure
    becomes an empty answer.
    """

    def __init__(self, metadata: MetadataClientPort) -> None:
        self._metadata = metadata

    async def catalog(
        self,
        content_type: StremioContentType,
        *,
        skip: int = 0,
        query: str | None = None,
    ) -> list[StremioMetaPreview]:
        """Popular titles, or search results for ``query``."""
        query = query.strip() if query else None
        page = skip_to_page(skip)
        try:
            return await self._metadata.catalog(content_type, page=page, query=query)
        except Exception:
            log.warning(
                "stremio_catalog_error",
                content_type=content_type,
                page=page,
                query=query,
                exc_info=True,
            )
            return []

    async def meta(
        self, tmdb_id: int, content_type: StremioContentType
    ) -> StremioMeta | None:
        try:
            return await self._metadata.get_meta(tmdb_id, content_type)
        except Exception:
            log.warning(
                "stremio_meta_error",
                tmdb_id=tmdb_id,
                content_type=content_type,
                exc_info=True,
            )
            return None
