"""Stremio stream resolution use case.

TMDB id -> title context -> expanded queries -> bounded search
-> relevance filter + dedup -> bounded extraction -> format -> rank.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

import structlog

from ezstremio.domain.entities.media import (
    Candidate,
    RankedResult,
    StreamDescriptor,
    TitleContext,
)
from ezstremio.domain.entities.stremio import StremioStreamRequest
from ezstremio.domain.ports.catalog_source import DetailsSourcePort, SearchSourcePort
from ezstremio.domain.ports.metadata import MetadataClientPort
from ezstremio.infrastructure.concurrency import BoundedExecutor

# ---------------------------------------------------------------------------
# Protocols: what this use case needs from its dependencies.
# Infrastructure components satisfy these via structural subtyping.
# ---------------------------------------------------------------------------


class _PipelineConfig(Protocol):
    """Configuration values consumed by StremioStreamUseCase."""

    site_label: str
    extract_concurrency: int
    max_candidates: int


class _StreamSorter(Protocol):
    def sort(self, results: list[RankedResult]) -> list[RankedResult]: ...


# Type aliases for injected pure functions.
_ExpandFn = Callable[[TitleContext], list[str]]
_FilterFn = Callable[[Iterable[Candidate], TitleContext], list[Candidate]]
_FormatFn = Callable[..., RankedResult]
_SorterFactory = Callable[[str], _StreamSorter]

log = structlog.get_logger(__name__)


class StremioStreamUseCase:
    """Resolve Stremio stream requests into ranked playable streams.

    Flow:
        1. Resolve the TMDB id to a title context (names, year, episode).
        2. Expand it into search queries.
        3. Run all queries (cap = the search source's ``max_concurrency``).
        4. Drop wrong-year hits and duplicate addresses.
        5. Extract sources from the first ``max_candidates`` hits
           (cap = ``extract_concurrency``).
        6. Format display text and rank best-first.

    Failures of individual searches or extractions only shrink the
    result; the pipeline itself does not raise for them.
    """

    def __init__(
        self,
        *,
        metadata: MetadataClientPort,
        search_source: SearchSourcePort,
        details_source: DetailsSourcePort,
        config: _PipelineConfig,
        expand_fn: _ExpandFn,
        filter_fn: _FilterFn,
        format_fn: _FormatFn,
        sorter_factory: _SorterFactory,
    ) -> None:
        self._metadata = metadata
        self._search_source = search_source
        self._details_source = details_source
        self._expand_fn = expand_fn
        self._filter_fn = filter_fn
        self._format_fn = format_fn
        self._sorter_factory = sorter_factory
        self._site_label = config.site_label
        self._extract_concurrency = config.extract_concurrency
        self._max_candidates = config.max_candidates

    async def execute(self, request: StremioStreamRequest) -> list[RankedResult]:
        """Resolve streams for a Stremio request.

        Returns:
            Ranked results, best first.  Empty if the title is unknown or
            nothing playable was found.
        """
        try:
            ctx = await self._metadata.get_title_context(
                request.tmdb_id,
                request.content_type,
                request.season,
                request.episode,
            )
        except Exception:
            log.warning(
                "stremio_title_lookup_error",
                tmdb_id=request.tmdb_id,
                exc_info=True,
            )
            return []

        if ctx is None:
            log.warning("stremio_title_not_found", tmdb_id=request.tmdb_id)
            return []

        return await self.find_streams(ctx)

    async def find_streams(self, ctx: TitleContext) -> list[RankedResult]:
        """Run the search aggregation pipeline for one title context."""
        queries = self._expand_fn(ctx)
        if not queries:
            log.info("stremio_no_queries", name=ctx.name)
            return []

        log.info(
            "stremio_search_start",
            name=ctx.name,
            original_name=ctx.original_name,
            year=ctx.year,
            season=ctx.season,
            episode=ctx.episode,
            queries=queries,
        )

        hits = await self._search(queries)
        candidates = self._filter_fn(hits, ctx)[: self._max_candidates]
        if not candidates:
            log.info("stremio_search_no_results", name=ctx.name, hits=len(hits))
            return []

        descriptors = await self._extract(candidates)
        results = [
            self._format_fn(descriptor, site_label=self._site_label)
            for descriptor in descriptors
        ]
        ranked = self._sorter_factory(ctx.year).sort(results)

        log.info(
            "stremio_search_complete",
            name=ctx.name,
            queries=len(queries),
            hits=len(hits),
            candidates=len(candidates),
            streams=len(ranked),
        )
        return ranked

    async def _search(self, queries: list[str]) -> list[Candidate]:
        executor: BoundedExecutor[str, Candidate] = BoundedExecutor(
            limit=self._search_source.max_concurrency, name="search"
        )
        return await executor.run(queries, self._search_source.search)

    async def _extract(self, candidates: list[Candidate]) -> list[StreamDescriptor]:
        """Descriptors in candidate order, then page order within a candidate."""

        async def _extract_one(
            indexed: tuple[int, Candidate],
        ) -> list[tuple[int, int, StreamDescriptor]]:
            index, candidate = indexed
            streams = await self._details_source.fetch_details(candidate.address)
            return [
                (index, position, stream.with_origin(candidate))
                for position, stream in enumerate(streams)
            ]

        executor: BoundedExecutor[
            tuple[int, Candidate], tuple[int, int, StreamDescriptor]
        ] = BoundedExecutor(limit=self._extract_concurrency, name="extract")
        tagged = await executor.run(list(enumerate(candidates)), _extract_one)
        tagged.sort(key=lambda entry: (entry[0], entry[1]))
        return [descriptor for _, _, descriptor in tagged]
