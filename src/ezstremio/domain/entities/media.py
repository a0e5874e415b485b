"""Value objects flowing through the search aggregation pipeline.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class TitleContext:
    """What the user asked for, built once per stream request."""

    name: str
    original_name: str = ""
    year: str = ""  # "2024" or "" when unknown
    season: int | None = None
    episode: int | None = None

    @property
    def names(self) -> tuple[str, ...]:
        """Localized name, then the original name when it differs."""
        if self.original_name and self.original_name != self.name:
            return (self.name, self.original_name)
        return (self.name,)

    @property
    def episode_suffix(self) -> str:
        if self.season is None or self.episode is None:
            return ""
        return f" S{self.season:02d}E{self.episode:02d}"


@dataclass(frozen=True)
class Candidate:
    """One search hit: a details page that might hold playable sources."""

    title: str
    address: str  # absolute details-page URL
    duration: str = ""
    size: str = ""


@dataclass(frozen=True)
class StreamDescriptor:
    """A playable source scraped from a details page."""

    label: str
    address: str
    source_resolution: str | None = None
    origin_title: str = ""
    origin_size: str = ""
    origin_duration: str = ""

    def with_origin(self, candidate: Candidate) -> StreamDescriptor:
        """Return a copy carrying the display fields of its search hit."""
        return replace(
            self,
            origin_title=candidate.title,
            origin_size=candidate.size,
            origin_duration=candidate.duration,
        )


@dataclass(frozen=True)
class RankedResult:
    """Final, display-ready stream entry. Order in lists is meaningful."""

    name: str
    description: str
    url: str
