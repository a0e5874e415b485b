"""Domain entities for the Stremio addon protocol.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

StremioContentType = Literal["movie", "series"]

ID_PREFIX = "eztmdb:"


@dataclass(frozen=True)
class StremioMetaPreview:
    """Stremio catalog item (MetaPreview object)."""

    id: str  # "eztmdb:550"
    type: StremioContentType
    name: str
    poster: str = ""
    description: str = ""
    release_info: str = ""  # "2024" or "2019-" for running series
    imdb_rating: str = ""
    genres: list[str] = field(default_factory=list)
    logo: str = ""
    runtime: str = ""  # "120 min"
    cast: list[str] = field(default_factory=list)
    director: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StremioVideo:
    """One episode entry in a series meta object."""

    id: str  # "eztmdb:1399:1:5"
    title: str
    season: int
    episode: int
    released: str = ""  # RFC3339
    thumbnail: str = ""
    overview: str = ""


@dataclass(frozen=True)
class StremioMeta:
    """Full Stremio Meta object (detail page)."""

    id: str
    type: StremioContentType
    name: str
    poster: str = ""
    background: str = ""
    logo: str = ""
    description: str = ""
    release_info: str = ""
    imdb_rating: str = ""
    runtime: str = ""
    genres: list[str] = field(default_factory=list)
    cast: list[str] = field(default_factory=list)
    director: list[str] = field(default_factory=list)
    videos: list[StremioVideo] = field(default_factory=list)


@dataclass(frozen=True)
class StremioStreamRequest:
    """Parsed Stremio stream request.

    Created from URL path: ``eztmdb:550`` (movie) or
    ``eztmdb:1399:1:5`` (series, season 1, episode 5).
    """

    tmdb_id: int
    content_type: StremioContentType
    season: int | None = None
    episode: int | None = None
