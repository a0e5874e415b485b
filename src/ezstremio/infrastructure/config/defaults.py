"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "ezstremio",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "ezStremio/0.1.1",
    },
    "playwright": {
        "headless": True,
        "timeout_ms": 30_000,
        "executable_path": None,
        "settle_ms": 2_000,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/ezstremio",
        "ttl_seconds": 3600,
    },
    "tmdb": {
        "api_key": None,
        "language": "cs-CZ",
    },
    "prehraj": {
        "base_url": "https://prehraj.to",
        "site_label": "Prehraj.to",
        "search_mode": "playwright",
        "search_concurrency": 4,
        "extract_concurrency": 5,
        "max_candidates": 25,
    },
}
