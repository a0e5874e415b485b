"""Stream ranking for the Stremio addon.

Quality signals are read back from the composed display text, in strict
priority order:

1. resolution of the uploaded source (``⚙️ Source:`` line)
2. resolution of the stream variant (``⚡ 1080p`` in the name)
3. file size (``💾 5.2 GB``)
4. whether the description mentions the release year
"""

from __future__ import annotations

import re

from ezstremio.domain.entities.media import RankedResult

_SOURCE_4K_RE = re.compile(r"Source:\s*4K")
_SOURCE_1080_RE = re.compile(r"Source:\s*1080p")
_SOURCE_RAW_RE = re.compile(r"Source:.*x\s*(\d+)")
_STREAM_RES_RE = re.compile(r"⚡\s+(\d{3,4})p")
_SIZE_RE = re.compile(r"💾\s*(\d+(?:\.\d+)?)\s*(GB|MB|kB)")

_UNIT_TO_MB = {"GB": 1024.0, "MB": 1.0, "kB": 1.0 / 1024.0}


def source_resolution(description: str) -> int:
    if _SOURCE_4K_RE.search(description):
        return 2160
    if _SOURCE_1080_RE.search(description):
        return 1080
    m = _SOURCE_RAW_RE.search(description)
    return int(m.group(1)) if m else 0


def stream_resolution(name: str) -> int:
    m = _STREAM_RES_RE.search(name)
    return int(m.group(1)) if m else 0


def size_in_mb(description: str) -> float:
    m = _SIZE_RE.search(description)
    if m is None:
        return 0.0
    return float(m.group(1)) * _UNIT_TO_MB[m.group(2)]


class StreamSorter:
    """Orders results best-first; equal keys keep their input order."""

    def __init__(self, year: str = "") -> None:
        self._year = year

    def rank(self, result: RankedResult) -> tuple[int, int, float, bool]:
        """Sort key for a single result (higher is better)."""
        return (
            source_resolution(result.description),
            stream_resolution(result.name),
            size_in_mb(result.description),
            self._year in result.description,
        )

    def sort(self, results: list[RankedResult]) -> list[RankedResult]:
        """Return a new list sorted descending by ``rank``."""
        return sorted(results, key=self.rank, reverse=True)
