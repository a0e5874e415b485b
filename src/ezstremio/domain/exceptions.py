"""Source collaborator exceptions."""

from __future__ import annotations


class SourceError(Exception):
    """Base class for failures of a search or details source."""


class FetchError(SourceError):
    """Raised when a page could not be fetched (network, timeout, status)."""


class NoSourcesFoundError(SourceError):
    """Raised when a details page was fetched but holds no playable sources."""
