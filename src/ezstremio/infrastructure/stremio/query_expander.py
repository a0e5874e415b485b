"""Search query expansion for one title request.

Pure transformation logic, no I/O.  The catalog site's search is
literal, so a single title is searched under several spellings:
as written, with Czech/Slovak diacritics folded and punctuation
flattened, and with colons dropped.  Each spelling is tried with and
without the release year.
"""

from __future__ import annotations

import re

from unidecode import unidecode

from ezstremio.domain.entities.media import TitleContext

# Separators the site's search treats as noise.
_SEPARATOR_RE = re.compile(r"[._\-:]")


def normalize_title(text: str) -> str:
    """Fold diacritics to ASCII, turn separators into spaces, collapse ws.

    >>> normalize_title("Šílenci: Návrat-domů")
    'Silenci Navrat domu'
    """
    text = unidecode(text)
    text = _SEPARATOR_RE.sub(" ", text)
    return " ".join(text.split())


def _spellings(name: str) -> list[str]:
    variants = [name]
    normalized = normalize_title(name)
    if normalized != name:
        variants.append(normalized)
    if ":" in name:
        without_colon = name.replace(":", " ")
        if without_colon not in variants:
            variants.append(without_colon)
    return variants


def expand_queries(ctx: TitleContext) -> list[str]:
    """Build the ordered, duplicate-free list of search queries.

    For every spelling of every name: the spelling plus the episode
    suffix, then the spelling with year plus suffix.  Empty names give
    no queries.
    """
    if not ctx.name.strip():
        return []

    suffix = ctx.episode_suffix
    queries: list[str] = []
    seen: set[str] = set()

    def _emit(query: str) -> None:
        query = query.strip()
        if query and query not in seen:
            seen.add(query)
            queries.append(query)

    for name in ctx.names:
        for spelling in _spellings(name):
            _emit(spelling + suffix)
            if ctx.year:
                _emit(f"{spelling} {ctx.year}{suffix}")

    return queries
