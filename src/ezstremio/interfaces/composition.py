"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from ezstremio.application.use_cases.stremio_catalog import StremioCatalogUseCase
from ezstremio.application.use_cases.stremio_stream import StremioStreamUseCase
from ezstremio.domain.ports.catalog_source import SearchSourcePort
from ezstremio.infrastructure.cache import DiskcacheAdapter
from ezstremio.infrastructure.config.schema import AppConfig
from ezstremio.infrastructure.prehraj import (
    BrowserSession,
    HttpxDetailsClient,
    HttpxSearchClient,
    PlaywrightSearchClient,
)
from ezstremio.infrastructure.stremio.query_expander import expand_queries
from ezstremio.infrastructure.stremio.stream_formatter import format_result
from ezstremio.infrastructure.stremio.stream_sorter import StreamSorter
from ezstremio.infrastructure.stremio.title_matcher import filter_candidates
from ezstremio.infrastructure.tmdb.client import HttpxTmdbClient
from ezstremio.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _build_search_source(state: AppState, config: AppConfig) -> SearchSourcePort:
    """Browser-backed search (default) or plain httpx search."""
    prehraj = config.prehraj
    if prehraj.search_mode == "httpx":
        state.browser_session = None
        return HttpxSearchClient(
            http_client=state.http_client,
            base_url=prehraj.base_url,
            max_concurrency=prehraj.search_concurrency,
        )

    state.browser_session = BrowserSession(
        headless=config.playwright_headless,
        executable_path=config.playwright_executable_path,
    )
    return PlaywrightSearchClient(
        session=state.browser_session,
        base_url=prehraj.base_url,
        timeout_ms=config.playwright_timeout_ms,
        settle_ms=config.playwright_settle_ms,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (required by the TMDB client)
        2. HTTP client (TMDB + details pages)
        3. TMDB client
        4. Search source (browser session or httpx) + details source
        5. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = DiskcacheAdapter(
        directory=config.cache_dir,
        ttl_seconds=config.cache_ttl_seconds,
    )
    await cache.__aenter__()
    state.cache = cache

    # 2) HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) TMDB client
    if not config.tmdb_api_key:
        log.warning(
            "tmdb_api_key_missing",
            hint="set TMDB_API_KEY; catalog, meta and streams will be empty",
        )
    state.metadata = HttpxTmdbClient(
        api_key=config.tmdb_api_key,
        http_client=state.http_client,
        cache=state.cache,
        language=config.tmdb_language,
    )

    # 4) Catalog site collaborators
    state.search_source = _build_search_source(state, config)
    state.details_source = HttpxDetailsClient(http_client=state.http_client)
    log.info(
        "search_source_initialized",
        mode=config.prehraj.search_mode,
        max_concurrency=state.search_source.max_concurrency,
        extract_concurrency=config.prehraj.extract_concurrency,
    )

    # 5) Use cases
    state.stremio_stream_uc = StremioStreamUseCase(
        metadata=state.metadata,
        search_source=state.search_source,
        details_source=state.details_source,
        config=config.prehraj,
        expand_fn=expand_queries,
        filter_fn=filter_candidates,
        format_fn=format_result,
        sorter_factory=StreamSorter,
    )
    state.stremio_catalog_uc = StremioCatalogUseCase(metadata=state.metadata)

    log.info("app_startup_complete")

    try:
        yield
    finally:
        if state.browser_session is not None:
            await state.browser_session.cleanup()

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
