"""Extract playable sources from a prehraj.to details page.

The player is configured by an inline script literal::

    var sources = [
        { file: "https://.../video-1080.mp4", label: '1080p' },
        { file: "https://.../video-720.mp4", label: '720p' },
    ];

The literal is not strict JSON (unquoted keys, mixed quotes), so it is
read with delimiter splitting and per-field regexes.  The page also
lists the uploaded file's resolution next to a ``Rozlišení:`` label,
which is attached to every extracted source as a quality hint.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from ezstremio.domain.entities.media import StreamDescriptor

_SOURCES_RE = re.compile(r"var sources = (\[[\s\S]*?\]);")
_FILE_RE = re.compile(r"""file:\s*["']([^"']+)["']""")
_LABEL_RE = re.compile(r"""label:\s*["']([^"']+)["']""")

RESOLUTION_MARKER = "Rozlišení:"
DEFAULT_LABEL = "Unknown"


def extract_resolution_hint(html: str) -> str | None:
    """Text of the value span next to the ``Rozlišení:`` label, if any."""
    soup = BeautifulSoup(html, "lxml")
    hint: str | None = None
    for item in soup.find_all("li"):
        if RESOLUTION_MARKER not in item.get_text():
            continue
        for span in item.find_all("span"):
            text = span.get_text()
            if RESOLUTION_MARKER not in text:
                hint = text.strip()
    return hint or None


def extract_sources(html: str) -> list[tuple[str, str]]:
    """``(file, label)`` pairs from the ``var sources`` literal, in order."""
    match = _SOURCES_RE.search(html)
    if match is None:
        return []

    pairs: list[tuple[str, str]] = []
    for segment in match.group(1).split("{"):
        if "file:" not in segment:
            continue
        file_match = _FILE_RE.search(segment)
        if file_match is None:
            continue
        label_match = _LABEL_RE.search(segment)
        label = label_match.group(1) if label_match else DEFAULT_LABEL
        pairs.append((file_match.group(1), label))
    return pairs


def extract_streams(html: str) -> list[StreamDescriptor]:
    """All stream descriptors on the page; empty when there is no source list."""
    sources = extract_sources(html)
    if not sources:
        return []
    hint = extract_resolution_hint(html)
    return [
        StreamDescriptor(label=label, address=address, source_resolution=hint)
        for address, label in sources
    ]
