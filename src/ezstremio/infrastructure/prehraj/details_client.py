"""Details page collaborator: fetch a video page and extract its sources."""

from __future__ import annotations

import httpx
import structlog

from ezstremio.domain.entities.media import StreamDescriptor
from ezstremio.domain.exceptions import NoSourcesFoundError
from ezstremio.infrastructure.prehraj.constants import DETAILS_USER_AGENT
from ezstremio.infrastructure.prehraj.http_fetch import fetch_page
from ezstremio.infrastructure.prehraj.stream_extractor import extract_streams

log = structlog.get_logger(__name__)


class HttpxDetailsClient:
    """Implements ``DetailsSourcePort`` with a shared httpx client."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        user_agent: str = DETAILS_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent

    async def fetch_details(self, address: str) -> list[StreamDescriptor]:
        html = await fetch_page(
            self._http, address, user_agent=self._user_agent, context="details"
        )
        streams = extract_streams(html)
        if not streams:
            raise NoSourcesFoundError(f"no sources found in script: {address}")

        log.debug(
            "prehraj_details_extracted",
            url=address,
            streams=len(streams),
            source_resolution=streams[0].source_resolution,
        )
        return streams
