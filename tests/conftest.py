"""Shared test fixtures for the ezStremio test suite."""

from __future__ import annotations

from typing import Any

import pytest

from ezstremio.domain.entities.media import Candidate, StreamDescriptor, TitleContext
from ezstremio.infrastructure.config.schema import PrehrajConfig

# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class MemoryCache:
    """Dict-backed stand-in for CachePort."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> Any | None:
        return self.data.get(key)

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> MemoryCache:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def wicked_context() -> TitleContext:
    """Movie context with identical localized and original names."""
    return TitleContext(name="Wicked", original_name="Wicked", year="2024")


@pytest.fixture()
def candidate() -> Candidate:
    return Candidate(
        title="Wicked 2024 CZ dabing",
        address="https://prehraj.to/wicked-2024-cz-dabing/abc123",
        duration="02:40:12",
        size="5.2 GB",
    )


@pytest.fixture()
def descriptor() -> StreamDescriptor:
    return StreamDescriptor(
        label="1080p",
        address="https://cdn.example.com/video-1080.mp4",
        source_resolution="3840 x 2160 px",
    )


@pytest.fixture()
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture()
def prehraj_config() -> PrehrajConfig:
    return PrehrajConfig()
