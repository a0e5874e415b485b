"""Search collaborator rendering result pages in the shared browser."""

from __future__ import annotations

import asyncio

import structlog
from playwright.async_api import Error as PlaywrightError

from ezstremio.domain.entities.media import Candidate
from ezstremio.domain.exceptions import FetchError
from ezstremio.infrastructure.prehraj.browser_session import BrowserSession
from ezstremio.infrastructure.prehraj.constants import DEFAULT_BASE_URL, search_url
from ezstremio.infrastructure.prehraj.search_parser import parse_search_results

log = structlog.get_logger(__name__)


class PlaywrightSearchClient:
    """Implements ``SearchSourcePort`` on top of one ``BrowserSession``.

    The session has a single page, so queries are served one at a time.
    """

    max_concurrency = 1

    def __init__(
        self,
        *,
        session: BrowserSession,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = 30_000,
        settle_ms: int = 2_000,
    ) -> None:
        self._session = session
        self._base_url = base_url
        self._timeout_ms = timeout_ms
        self._settle_seconds = settle_ms / 1000.0
        self._page_lock = asyncio.Lock()

    async def search(self, query: str) -> list[Candidate]:
        url = search_url(query, self._base_url)
        async with self._page_lock:
            html = await self._render(url)
        candidates = parse_search_results(html, base_url=self._base_url, query=query)
        log.debug("prehraj_search_done", query=query, results=len(candidates))
        return candidates

    async def _render(self, url: str) -> str:
        page = await self._session.page()
        try:
            resp = await page.goto(url, wait_until="load", timeout=self._timeout_ms)
            if resp is not None and resp.status >= 400:
                raise FetchError(f"{url} returned status {resp.status}")
            # Results are filled in lazily after the load event.
            if self._settle_seconds > 0:
                await asyncio.sleep(self._settle_seconds)
            return await page.content()
        except PlaywrightError as exc:
            raise FetchError(f"browser error rendering {url}: {exc}") from exc
