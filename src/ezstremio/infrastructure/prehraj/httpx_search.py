"""Search collaborator using plain HTTP GETs (no browser)."""

from __future__ import annotations

import httpx
import structlog

from ezstremio.domain.entities.media import Candidate
from ezstremio.infrastructure.prehraj.constants import (
    DEFAULT_BASE_URL,
    SEARCH_USER_AGENT,
    search_url,
)
from ezstremio.infrastructure.prehraj.http_fetch import fetch_page
from ezstremio.infrastructure.prehraj.search_parser import parse_search_results

log = structlog.get_logger(__name__)


class HttpxSearchClient:
    """Implements ``SearchSourcePort``.

    Stateless, so several queries may run at once; ``max_concurrency``
    is a politeness limit towards the site.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        max_concurrency: int = 4,
        user_agent: str = SEARCH_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._base_url = base_url
        self._user_agent = user_agent
        self.max_concurrency = max_concurrency

    async def search(self, query: str) -> list[Candidate]:
        url = search_url(query, self._base_url)
        html = await fetch_page(
            self._http, url, user_agent=self._user_agent, context="search"
        )
        candidates = parse_search_results(html, base_url=self._base_url, query=query)
        log.debug("prehraj_search_done", query=query, results=len(candidates))
        return candidates
