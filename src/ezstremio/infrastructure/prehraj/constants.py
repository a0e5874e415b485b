"""Shared constants for the prehraj.to fetchers."""

from __future__ import annotations

from urllib.parse import quote

DEFAULT_BASE_URL = "https://prehraj.to"

SEARCH_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0.0.0 Safari/537.36"
)

DETAILS_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Non-video sections linked from every search page.
NON_VIDEO_PREFIXES = ("/hledej", "/profil", "/cenik")


def search_url(query: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """``<base>/hledej/<query>`` with the query percent-encoded as a path segment."""
    return f"{base_url.rstrip('/')}/hledej/{quote(query, safe='')}"


def absolute_url(href: str, base_url: str = DEFAULT_BASE_URL) -> str:
    if href.startswith("http"):
        return href
    return base_url.rstrip("/") + href
