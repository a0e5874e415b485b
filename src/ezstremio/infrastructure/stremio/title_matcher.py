"""Relevance filtering and deduplication of search hits.

Pure transformation logic without I/O.
The year is the only strict criterion: a hit that names a different
release year is dropped, a hit without any year passes.  Name
containment is computed for diagnostics only.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

import structlog

from ezstremio.domain.entities.media import Candidate, TitleContext
from ezstremio.infrastructure.stremio.query_expander import normalize_title

log = structlog.get_logger(__name__)

# 4-digit year starting with 19xx or 20xx
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


def _normalize_for_match(text: str) -> str:
    return normalize_title(text).lower()


def _target_year(year: str) -> int | None:
    year = year.strip()
    if not year.isdecimal():
        return None
    value = int(year)
    return value if value > 0 else None


def matches_year(title: str, year: int | None) -> bool:
    """True unless the title names a year and none of them is ``year``."""
    if year is None:
        return True
    found = _YEAR_RE.findall(title)
    if not found:
        return True
    return any(int(token) == year for token in found)


def contains_name(title: str, names: Sequence[str]) -> bool:
    """True when any normalized name is a substring of the normalized title."""
    norm_title = _normalize_for_match(title)
    return any(_normalize_for_match(name) in norm_title for name in names if name)


def filter_candidates(
    candidates: Iterable[Candidate],
    ctx: TitleContext,
) -> list[Candidate]:
    """Drop wrong-year hits and address duplicates, keeping first-seen order."""
    year = _target_year(ctx.year)
    seen: set[str] = set()
    kept: list[Candidate] = []
    rejected_year = 0
    duplicates = 0

    for candidate in candidates:
        if not matches_year(candidate.title, year):
            rejected_year += 1
            continue

        if not contains_name(candidate.title, ctx.names):
            log.debug(
                "title_match_name_missing",
                title=candidate.title,
                names=list(ctx.names),
            )

        if candidate.address in seen:
            duplicates += 1
            continue
        seen.add(candidate.address)
        kept.append(candidate)

    log.debug(
        "title_match_filtered",
        kept=len(kept),
        rejected_year=rejected_year,
        duplicates=duplicates,
        year=year,
    )
    return kept
