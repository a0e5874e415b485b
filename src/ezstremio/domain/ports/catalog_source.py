"""Ports for the scraped catalog site (search + details pages)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ezstremio.domain.entities.media import Candidate, StreamDescriptor


@runtime_checkable
class SearchSourcePort(Protocol):
    """Runs one textual query against the catalog site.

    ``max_concurrency`` is the number of queries the fetcher can serve at
    once; a single shared browser session declares 1.
    """

    max_concurrency: int

    async def search(self, query: str) -> list[Candidate]:
        """Return hits with absolute addresses.

        Raises:
            FetchError: network failure, timeout or non-success status.
        """
        ...


@runtime_checkable
class DetailsSourcePort(Protocol):
    """Fetches one details page and extracts its playable sources."""

    async def fetch_details(self, address: str) -> list[StreamDescriptor]:
        """Return at least one descriptor.

        Raises:
            FetchError: page could not be fetched.
            NoSourcesFoundError: page held no sources.
        """
        ...
