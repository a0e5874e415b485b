"""Parse prehraj.to search result pages into candidates.

Result anchors carry their metadata as loose text lines, e.g.::

    <a class="video--link" href="/wicked-2024/abc123">
      <span>Wicked 2024 CZ dabing</span>
      <span>02:40:12</span>
      <span>5.2 GB</span>
    </a>

Short lines containing ``:`` are durations, lines with a size unit are
sizes, everything else is the title (the last such line wins).
"""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ezstremio.domain.entities.media import Candidate
from ezstremio.infrastructure.prehraj.constants import (
    DEFAULT_BASE_URL,
    NON_VIDEO_PREFIXES,
    absolute_url,
)

log = structlog.get_logger(__name__)

_SIZE_UNITS = ("MB", "GB", "kB")


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _text_lines(anchor: Tag) -> list[str]:
    """Text lines of an anchor, one or more per direct child.

    Inline markup inside a child (a highlighted year in the title) stays
    part of the same line.
    """
    lines: list[str] = []
    for child in anchor.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Tag):
            text = child.get_text()
        elif isinstance(child, NavigableString):
            text = str(child)
        else:
            continue
        lines.extend(text.split("\n"))
    return lines


def parse_anchor(anchor: Tag, base_url: str = DEFAULT_BASE_URL) -> Candidate | None:
    """Turn one result anchor into a Candidate, or None if it has no title."""
    href = anchor.get("href")
    if not isinstance(href, str) or not href:
        return None

    duration = ""
    size = ""
    title = ""

    for raw_line in _text_lines(anchor):
        line = raw_line.strip()
        if not line:
            continue
        if ":" in line and len(line) < 10:
            duration = line
        elif any(unit in line for unit in _SIZE_UNITS):
            size = line
        else:
            title = line

    if not title and (size or duration):
        attr_title = anchor.get("title")
        if isinstance(attr_title, str):
            title = attr_title
        else:
            title = anchor.get_text(" ", strip=True)

    if not title:
        return None

    return Candidate(
        title=title,
        address=absolute_url(href, base_url),
        duration=duration,
        size=size,
    )


def _looks_like_video_anchor(anchor: Tag) -> bool:
    href = anchor.get("href")
    if not isinstance(href, str) or href.startswith(NON_VIDEO_PREFIXES):
        return False
    text = anchor.get_text()
    return ("MB" in text or "GB" in text) and ":" in text


def parse_search_results(
    html: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    query: str = "",
) -> list[Candidate]:
    """Extract all candidates from a search page in document order.

    Falls back to scanning every anchor with a size and a duration in its
    text when the page has no ``a.video--link`` result anchors.
    """
    soup = parse_html(html)
    anchors = soup.select("a.video--link")
    if not anchors:
        anchors = [a for a in soup.find_all("a") if _looks_like_video_anchor(a)]
        if anchors:
            log.debug("prehraj_search_fallback_selector", query=query, anchors=len(anchors))

    candidates = [
        candidate
        for anchor in anchors
        if (candidate := parse_anchor(anchor, base_url)) is not None
    ]

    if not candidates:
        page_title = soup.title.get_text(strip=True) if soup.title else ""
        log.debug(
            "prehraj_search_no_results",
            query=query,
            page_title=page_title,
            body_length=len(html),
        )
    return candidates
