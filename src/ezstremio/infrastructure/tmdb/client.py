"""TMDB API client: async httpx implementation with caching.

All lookups use the Czech locale.  Artwork prefers Czech, then Slovak
images; logos further fall back to English, then textless ones.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from ezstremio.domain.entities.media import TitleContext
from ezstremio.domain.entities.stremio import (
    ID_PREFIX,
    StremioContentType,
    StremioMeta,
    StremioMetaPreview,
    StremioVideo,
)
from ezstremio.domain.ports.cache import CachePort
from ezstremio.infrastructure.concurrency import BoundedExecutor

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"
_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"
_BACKDROP_BASE = "https://image.tmdb.org/t/p/original"

_IMAGE_LANGUAGES = "cs,sk,en,null"
_POSTER_LANGUAGES = ("cs", "sk")
_LOGO_LANGUAGES = ("cs", "sk", "en")

_META_CAST_LIMIT = 10
_CATALOG_CAST_LIMIT = 3

# Cache TTLs (seconds)
_TTL_DETAILS = 86_400  # 24 hours
_TTL_SEASON = 21_600  # 6 hours
_TTL_DISCOVER = 21_600  # 6 hours
_TTL_SEARCH = 3_600  # 1 hour
_TTL_GENRES = 604_800  # 7 days


def _tmdb_type(content_type: StremioContentType) -> str:
    return "tv" if content_type == "series" else "movie"


def _image_url(path: str | None, base: str = _IMAGE_BASE) -> str:
    return f"{base}{path}" if path else ""


def _year(date_str: str | None) -> str:
    return date_str[:4] if date_str and len(date_str) >= 4 else ""


def _rating(vote: Any) -> str:
    try:
        return f"{float(vote or 0):.1f}"
    except (TypeError, ValueError):
        return ""


def _to_rfc3339(date_str: str) -> str:
    """``"2024-01-05"`` -> ``"2024-01-05T00:00:00Z"``; other input unchanged."""
    if len(date_str) < 10:
        return date_str
    try:
        dt = datetime.strptime(date_str[:10], "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return date_str
    return dt.isoformat().replace("+00:00", "Z")


def pick_poster(detail: dict[str, Any]) -> str:
    """Czech poster, then Slovak, then the default ``poster_path``."""
    posters = (detail.get("images") or {}).get("posters") or []
    for lang in _POSTER_LANGUAGES:
        for img in posters:
            if img.get("iso_639_1") == lang and img.get("file_path"):
                return _image_url(img["file_path"])
    return _image_url(detail.get("poster_path"))


def pick_logo(detail: dict[str, Any]) -> str:
    """Logo by language: cs > sk > en > textless > first available."""
    logos = [
        img
        for img in (detail.get("images") or {}).get("logos") or []
        if img.get("file_path")
    ]
    if not logos:
        return ""
    for lang in _LOGO_LANGUAGES:
        for img in logos:
            if img.get("iso_639_1") == lang:
                return _image_url(img["file_path"])
    for img in logos:
        if img.get("iso_639_1") in (None, "", "null"):
            return _image_url(img["file_path"])
    return _image_url(logos[0]["file_path"])


def _cast(detail: dict[str, Any], limit: int) -> list[str]:
    cast = (detail.get("credits") or {}).get("cast") or []
    return [c["name"] for c in cast[:limit] if c.get("name")]


def _directors(detail: dict[str, Any]) -> list[str]:
    crew = (detail.get("credits") or {}).get("crew") or []
    return [c["name"] for c in crew if c.get("job") == "Director" and c.get("name")]


def _runtime(detail: dict[str, Any], tmdb_type: str) -> str:
    if tmdb_type == "movie":
        minutes = detail.get("runtime") or 0
    else:
        run_times = detail.get("episode_run_time") or []
        minutes = run_times[0] if run_times else 0
    return f"{minutes} min" if minutes else ""


def _series_release_info(first_air: str | None, last_air: str | None) -> str:
    start = _year(first_air)
    if not start:
        return ""
    end = _year(last_air)
    if end and end != start:
        return f"{start}-{end}"
    return f"{start}-"


class HttpxTmdbClient:
    """Async TMDB client using httpx + CachePort.

    Implements ``MetadataClientPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        language: str = "cs-CZ",
        max_concurrent: int = 5,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._cache = cache
        self._language = language
        self._max_concurrent = max_concurrent
        self._genres: dict[int, str] | None = None
        self._genre_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": self._language, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        if not self._api_key:
            log.warning("tmdb_api_key_missing", path=path)
            return None

        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

    async def _cached_get(
        self, cache_key: str, ttl: int, path: str, **extra: Any
    ) -> dict[str, Any] | None:
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached
        data = await self._get(path, **extra)
        if data is not None:
            await self._cache.set(cache_key, data, ttl=ttl)
        return data

    async def _details(self, tmdb_type: str, tmdb_id: int) -> dict[str, Any] | None:
        """Details with credits and localized images appended."""
        return await self._cached_get(
            f"tmdb:details:{tmdb_type}:{tmdb_id}:{self._language}",
            _TTL_DETAILS,
            f"/{tmdb_type}/{tmdb_id}",
            append_to_response="credits,images",
            include_image_language=_IMAGE_LANGUAGES,
        )

    async def _genre_map(self) -> dict[int, str]:
        """Genre id -> localized name, loaded once per process."""
        if self._genres is not None:
            return self._genres
        async with self._genre_lock:
            if self._genres is not None:
                return self._genres
            genres: dict[int, str] = {}
            for tmdb_type in ("movie", "tv"):
                data = await self._cached_get(
                    f"tmdb:genres:{tmdb_type}:{self._language}",
                    _TTL_GENRES,
                    f"/genre/{tmdb_type}/list",
                )
                if data is None:
                    continue
                for genre in data.get("genres", []):
                    genres[genre["id"]] = genre["name"]
            # Retry on the next call when nothing could be loaded.
            if genres:
                self._genres = genres
            log.info("tmdb_genres_loaded", count=len(genres))
            return genres

    def _executor(self, name: str) -> BoundedExecutor:
        return BoundedExecutor(limit=self._max_concurrent, name=name)

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------

    async def _season_videos(
        self, tmdb_id: int, season: int, background: str
    ) -> list[StremioVideo]:
        data = await self._cached_get(
            f"tmdb:season:{tmdb_id}:{season}:{self._language}",
            _TTL_SEASON,
            f"/tv/{tmdb_id}/season/{season}",
        )
        if data is None:
            return []

        videos = []
        for ep in data.get("episodes", []):
            number = ep.get("episode_number")
            if number is None:
                continue
            videos.append(
                StremioVideo(
                    id=f"{ID_PREFIX}{tmdb_id}:{season}:{number}",
                    title=ep.get("name") or "",
                    season=season,
                    episode=number,
                    released=_to_rfc3339(ep.get("air_date") or ""),
                    thumbnail=_image_url(ep.get("still_path")) or background,
                    overview=ep.get("overview") or "",
                )
            )
        return videos

    async def get_meta(
        self, tmdb_id: int, content_type: StremioContentType
    ) -> StremioMeta | None:
        """Full meta object; series include every regular season's episodes."""
        tmdb_type = _tmdb_type(content_type)
        detail = await self._details(tmdb_type, tmdb_id)
        if detail is None:
            return None

        background = _image_url(detail.get("backdrop_path"), _BACKDROP_BASE)

        if tmdb_type == "movie":
            name = detail.get("title") or detail.get("original_title") or ""
            release_info = _year(detail.get("release_date"))
        else:
            name = detail.get("name") or detail.get("original_name") or ""
            release_info = _series_release_info(
                detail.get("first_air_date"), detail.get("last_air_date")
            )

        videos: list[StremioVideo] = []
        if tmdb_type == "tv":
            # Season 0 (specials) is skipped.
            seasons = [
                s["season_number"]
                for s in detail.get("seasons") or []
                if s.get("season_number")
            ]

            async def _fetch_season(season: int) -> list[StremioVideo]:
                return await self._season_videos(tmdb_id, season, background)

            videos = await self._executor("tmdb_seasons").run(seasons, _fetch_season)
            videos.sort(key=lambda v: (v.season, v.episode))

        return StremioMeta(
            id=f"{ID_PREFIX}{tmdb_id}",
            type=content_type,
            name=name,
            poster=pick_poster(detail),
            background=background,
            logo=pick_logo(detail),
            description=detail.get("overview") or "",
            release_info=release_info,
            imdb_rating=_rating(detail.get("vote_average")),
            runtime=_runtime(detail, tmdb_type),
            genres=[g["name"] for g in detail.get("genres") or [] if g.get("name")],
            cast=_cast(detail, _META_CAST_LIMIT),
            director=_directors(detail),
            videos=videos,
        )

    async def get_title_context(
        self,
        tmdb_id: int,
        content_type: StremioContentType,
        season: int | None = None,
        episode: int | None = None,
    ) -> TitleContext | None:
        """Localized and original name plus release year for searching."""
        tmdb_type = _tmdb_type(content_type)
        detail = await self._details(tmdb_type, tmdb_id)
        if detail is None:
            return None

        if tmdb_type == "movie":
            name = detail.get("title") or ""
            original = detail.get("original_title") or ""
            year = _year(detail.get("release_date"))
        else:
            name = detail.get("name") or ""
            original = detail.get("original_name") or ""
            year = _year(detail.get("first_air_date"))

        if not name and not original:
            return None
        return TitleContext(
            name=name or original,
            original_name=original,
            year=year,
            season=season,
            episode=episode,
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def _list_page(
        self, tmdb_type: str, page: int, query: str | None
    ) -> list[dict[str, Any]]:
        if query:
            data = await self._cached_get(
                f"tmdb:search:{tmdb_type}:{query}:{page}:{self._language}",
                _TTL_SEARCH,
                f"/search/{tmdb_type}",
                query=query,
                page=page,
                include_adult="false",
            )
        else:
            data = await self._cached_get(
                f"tmdb:discover:{tmdb_type}:{page}:{self._language}",
                _TTL_DISCOVER,
                f"/discover/{tmdb_type}",
                sort_by="popularity.desc",
                include_adult="false",
                page=page,
            )
        if data is None:
            return []
        return [item for item in data.get("results", []) if item.get("id")]

    def _preview(
        self,
        item: dict[str, Any],
        content_type: StremioContentType,
        genres: dict[int, str],
        detail: dict[str, Any] | None,
    ) -> StremioMetaPreview:
        tmdb_type = _tmdb_type(content_type)
        if tmdb_type == "movie":
            name = item.get("title") or item.get("original_title") or ""
            release_info = _year(item.get("release_date"))
        else:
            name = item.get("name") or item.get("original_name") or ""
            start = _year(item.get("first_air_date"))
            release_info = f"{start}-" if start else ""

        poster = _image_url(item.get("poster_path"))
        logo = runtime = ""
        cast: list[str] = []
        directors: list[str] = []
        if detail is not None:
            poster = pick_poster({**detail, "poster_path": item.get("poster_path")})
            logo = pick_logo(detail)
            runtime = _runtime(detail, tmdb_type)
            cast = _cast(detail, _CATALOG_CAST_LIMIT)
            directors = _directors(detail)

        return StremioMetaPreview(
            id=f"{ID_PREFIX}{item['id']}",
            type=content_type,
            name=name,
            poster=poster,
            description=item.get("overview") or "",
            release_info=release_info,
            imdb_rating=_rating(item.get("vote_average")),
            genres=[genres[g] for g in item.get("genre_ids") or [] if g in genres],
            logo=logo,
            runtime=runtime,
            cast=cast,
            director=directors,
        )

    async def catalog(
        self,
        content_type: StremioContentType,
        page: int = 1,
        query: str | None = None,
    ) -> list[StremioMetaPreview]:
        """Popular titles (or search hits), enriched with details.

        Order follows TMDB.  A title whose details cannot be loaded is
        returned with list-level data only.
        """
        tmdb_type = _tmdb_type(content_type)
        items = await self._list_page(tmdb_type, page, query)
        if not items:
            return []

        genres = await self._genre_map()

        async def _enrich(
            indexed: tuple[int, dict[str, Any]],
        ) -> list[tuple[int, StremioMetaPreview]]:
            index, item = indexed
            detail = await self._details(tmdb_type, item["id"])
            return [(index, self._preview(item, content_type, genres, detail))]

        enriched = await self._executor("tmdb_catalog").run(
            list(enumerate(items)), _enrich
        )
        enriched.sort(key=lambda pair: pair[0])
        previews = [preview for _, preview in enriched]

        log.info(
            "tmdb_catalog_loaded",
            content_type=content_type,
            page=page,
            query=query,
            count=len(previews),
        )
        return previews
