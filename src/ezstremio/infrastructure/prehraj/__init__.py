"""prehraj.to search and details collaborators."""

from .browser_session import BrowserSession
from .details_client import HttpxDetailsClient
from .httpx_search import HttpxSearchClient
from .playwright_search import PlaywrightSearchClient

__all__ = [
    "BrowserSession",
    "HttpxDetailsClient",
    "HttpxSearchClient",
    "PlaywrightSearchClient",
]
