"""Tests for the prehraj.to search and details collaborators."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx
from playwright.async_api import Error as PlaywrightError

from ezstremio.domain.exceptions import FetchError, NoSourcesFoundError, SourceError
from ezstremio.domain.ports.catalog_source import DetailsSourcePort, SearchSourcePort
from ezstremio.infrastructure.prehraj import (
    HttpxDetailsClient,
    HttpxSearchClient,
    PlaywrightSearchClient,
)
from ezstremio.infrastructure.prehraj.constants import (
    DETAILS_USER_AGENT,
    SEARCH_USER_AGENT,
)
from ezstremio.infrastructure.prehraj.http_fetch import fetch_page

_BASE = "https://prehraj.to"

_SEARCH_HTML = """
<html><body>
  <a class="video--link" href="/wicked-2024/abc">
    <span>Wicked 2024 CZ</span><span>02:40:12</span><span>5.2 GB</span>
  </a>
</body></html>
"""

_DETAILS_HTML = """
<ul><li><span>Rozlišení:</span><span>1920 x 1080 px</span></li></ul>
<script>var sources = [{file: "https://cdn.example.com/a.mp4", label: '1080p'}];</script>
"""


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------


class TestFetchPage:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_returns_body(self) -> None:
        route = respx.get(f"{_BASE}/x").respond(200, text="<html>ok</html>")
        async with httpx.AsyncClient() as client:
            body = await fetch_page(client, f"{_BASE}/x", user_agent="UA/1")
        assert body == "<html>ok</html>"
        assert route.calls.last.request.headers["User-Agent"] == "UA/1"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_non_200_raises(self) -> None:
        respx.get(f"{_BASE}/x").respond(503)
        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="503"):
                await fetch_page(client, f"{_BASE}/x", user_agent="UA/1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_content_is_not_success(self) -> None:
        respx.get(f"{_BASE}/x").respond(204)
        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError):
                await fetch_page(client, f"{_BASE}/x", user_agent="UA/1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_timeout_raises(self) -> None:
        respx.get(f"{_BASE}/x").mock(side_effect=httpx.ReadTimeout("slow"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="timeout"):
                await fetch_page(client, f"{_BASE}/x", user_agent="UA/1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_transport_error_raises(self) -> None:
        respx.get(f"{_BASE}/x").mock(side_effect=httpx.ConnectError("refused"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError) as exc_info:
                await fetch_page(client, f"{_BASE}/x", user_agent="UA/1")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert isinstance(exc_info.value, SourceError)


# ---------------------------------------------------------------------------
# HttpxSearchClient
# ---------------------------------------------------------------------------


class TestHttpxSearchClient:
    def test_satisfies_port(self) -> None:
        client = HttpxSearchClient(http_client=httpx.AsyncClient())
        assert isinstance(client, SearchSourcePort)
        assert client.max_concurrency == 4

    @respx.mock
    @pytest.mark.asyncio()
    async def test_search_parses_results(self) -> None:
        route = respx.get(f"{_BASE}/hledej/Wicked").respond(200, text=_SEARCH_HTML)

        async with httpx.AsyncClient() as http:
            client = HttpxSearchClient(http_client=http, base_url=_BASE, max_concurrency=2)
            candidates = await client.search("Wicked")

        assert len(candidates) == 1
        assert candidates[0].title == "Wicked 2024 CZ"
        assert candidates[0].address == f"{_BASE}/wicked-2024/abc"
        assert route.calls.last.request.headers["User-Agent"] == SEARCH_USER_AGENT

    @respx.mock
    @pytest.mark.asyncio()
    async def test_search_error_propagates(self) -> None:
        respx.get(f"{_BASE}/hledej/Wicked").respond(500)
        async with httpx.AsyncClient() as http:
            client = HttpxSearchClient(http_client=http, base_url=_BASE)
            with pytest.raises(FetchError):
                await client.search("Wicked")


# ---------------------------------------------------------------------------
# HttpxDetailsClient
# ---------------------------------------------------------------------------


class TestHttpxDetailsClient:
    def test_satisfies_port(self) -> None:
        client = HttpxDetailsClient(http_client=httpx.AsyncClient())
        assert isinstance(client, DetailsSourcePort)

    @respx.mock
    @pytest.mark.asyncio()
    async def test_extracts_streams(self) -> None:
        route = respx.get(f"{_BASE}/wicked-2024/abc").respond(200, text=_DETAILS_HTML)

        async with httpx.AsyncClient() as http:
            streams = await HttpxDetailsClient(http_client=http).fetch_details(
                f"{_BASE}/wicked-2024/abc"
            )

        assert len(streams) == 1
        assert streams[0].label == "1080p"
        assert streams[0].address == "https://cdn.example.com/a.mp4"
        assert streams[0].source_resolution == "1920 x 1080 px"
        assert route.calls.last.request.headers["User-Agent"] == DETAILS_USER_AGENT

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_sources_raises(self) -> None:
        respx.get(f"{_BASE}/gone").respond(200, text="<html>Video bylo smazáno</html>")

        async with httpx.AsyncClient() as http:
            with pytest.raises(NoSourcesFoundError, match="no sources found"):
                await HttpxDetailsClient(http_client=http).fetch_details(f"{_BASE}/gone")


# ---------------------------------------------------------------------------
# PlaywrightSearchClient
# ---------------------------------------------------------------------------


def _session_with_page(page: MagicMock) -> MagicMock:
    session = MagicMock()
    session.page = AsyncMock(return_value=page)
    return session


def _page(*, status: int = 200, html: str = _SEARCH_HTML) -> MagicMock:
    page = MagicMock()
    response = MagicMock()
    response.status = status
    page.goto = AsyncMock(return_value=response)
    page.content = AsyncMock(return_value=html)
    return page


class TestPlaywrightSearchClient:
    def test_serialized(self) -> None:
        client = PlaywrightSearchClient(session=MagicMock())
        assert client.max_concurrency == 1
        assert isinstance(client, SearchSourcePort)

    @pytest.mark.asyncio()
    async def test_search_renders_and_parses(self) -> None:
        page = _page()
        client = PlaywrightSearchClient(
            session=_session_with_page(page), base_url=_BASE, settle_ms=0
        )

        candidates = await client.search("Wicked")

        assert [c.title for c in candidates] == ["Wicked 2024 CZ"]
        page.goto.assert_awaited_once_with(
            f"{_BASE}/hledej/Wicked", wait_until="load", timeout=30_000
        )

    @pytest.mark.asyncio()
    async def test_error_status_raises(self) -> None:
        client = PlaywrightSearchClient(
            session=_session_with_page(_page(status=403)), base_url=_BASE, settle_ms=0
        )
        with pytest.raises(FetchError, match="403"):
            await client.search("Wicked")

    @pytest.mark.asyncio()
    async def test_browser_error_mapped(self) -> None:
        page = _page()
        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_TIMED_OUT"))
        client = PlaywrightSearchClient(
            session=_session_with_page(page), base_url=_BASE, settle_ms=0
        )
        with pytest.raises(FetchError, match="browser error"):
            await client.search("Wicked")
