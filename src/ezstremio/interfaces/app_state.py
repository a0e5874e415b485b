"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from ezstremio.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from ezstremio.application.use_cases.stremio_catalog import StremioCatalogUseCase
    from ezstremio.application.use_cases.stremio_stream import StremioStreamUseCase
    from ezstremio.domain.ports import (
        CachePort,
        DetailsSourcePort,
        MetadataClientPort,
        SearchSourcePort,
    )
    from ezstremio.infrastructure.prehraj.browser_session import BrowserSession


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Shared Chromium session (None in httpx search mode)
    browser_session: BrowserSession | None

    # Domain Ports
    metadata: MetadataClientPort
    search_source: SearchSourcePort
    details_source: DetailsSourcePort

    # Use cases
    stremio_stream_uc: StremioStreamUseCase
    stremio_catalog_uc: StremioCatalogUseCase
