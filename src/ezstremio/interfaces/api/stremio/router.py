"""Stremio addon API endpoints (manifest, catalog, meta, stream)."""

from __future__ import annotations

from typing import Any, cast
from urllib.parse import parse_qsl

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ezstremio.domain.entities.media import RankedResult
from ezstremio.domain.entities.stremio import (
    ID_PREFIX,
    StremioContentType,
    StremioMeta,
    StremioMetaPreview,
    StremioStreamRequest,
    StremioVideo,
)
from ezstremio.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

_CATALOG_PREFIX = "tmdb_"

MANIFEST: dict[str, Any] = {
    "id": "org.ezstremio.addon",
    "version": "0.1.1",
    "name": "ezStremio",
    "description": "Czech/Slovak dubbed films and TV shows",
    "resources": ["catalog", "stream", "meta"],
    "types": ["movie", "series"],
    "catalogs": [
        {
            "type": "movie",
            "id": "tmdb_movies_cs",
            "name": "CZ/SK Movies (TMDB)",
            "extra": [{"name": "search"}, {"name": "skip"}],
        },
        {
            "type": "series",
            "id": "tmdb_series_cs",
            "name": "CZ/SK Series (TMDB)",
            "extra": [{"name": "search"}, {"name": "skip"}],
        },
    ],
    "idPrefixes": [ID_PREFIX],
}


def _json(content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content=content, headers=_CORS_HEADERS)


def _content_type(raw: str) -> StremioContentType | None:
    if raw in ("movie", "series"):
        return cast(StremioContentType, raw)
    return None


def _parse_tmdb_id(raw_id: str) -> int | None:
    """``"eztmdb:550"`` -> 550; anything else -> None."""
    if not raw_id.startswith(ID_PREFIX):
        return None
    try:
        return int(raw_id[len(ID_PREFIX):])
    except ValueError:
        return None


def _parse_stream_id(content_type: str, raw_id: str) -> StremioStreamRequest | None:
    """Parse a Stremio stream id into a StremioStreamRequest.

    Movies: ``eztmdb:550``
    Series: ``eztmdb:1399:1:5`` (season 1, episode 5)
    """
    ct = _content_type(content_type)
    if ct is None or not raw_id.startswith(ID_PREFIX):
        return None

    parts = raw_id[len(ID_PREFIX):].split(":")
    try:
        tmdb_id = int(parts[0])
        if len(parts) >= 3:
            return StremioStreamRequest(
                tmdb_id=tmdb_id,
                content_type=ct,
                season=int(parts[1]),
                episode=int(parts[2]),
            )
    except ValueError:
        return None
    return StremioStreamRequest(tmdb_id=tmdb_id, content_type=ct)


def _parse_extra(extra: str) -> tuple[int, str | None]:
    """``"search=Wicked&skip=20"`` -> ``(20, "Wicked")``."""
    skip = 0
    query: str | None = None
    for key, value in parse_qsl(extra, keep_blank_values=True):
        if key == "skip":
            try:
                skip = int(value)
            except ValueError:
                log.debug("stremio_catalog_bad_skip", value=value)
        elif key == "search":
            query = value
    return skip, query


def _compact(data: dict[str, Any], *, keep: tuple[str, ...] = ()) -> dict[str, Any]:
    """Drop empty values except for the keys in ``keep``."""
    return {k: v for k, v in data.items() if v or k in keep}


def _preview_to_json(m: StremioMetaPreview) -> dict[str, Any]:
    return _compact(
        {
            "id": m.id,
            "type": m.type,
            "name": m.name,
            "poster": m.poster,
            "logo": m.logo,
            "description": m.description,
            "releaseInfo": m.release_info,
            "imdbRating": m.imdb_rating,
            "genres": m.genres,
            "cast": m.cast,
            "director": m.director,
            "runtime": m.runtime,
        },
        keep=("id", "type", "name", "poster"),
    )


def _video_to_json(v: StremioVideo) -> dict[str, Any]:
    return _compact(
        {
            "id": v.id,
            "title": v.title,
            "released": v.released,
            "thumbnail": v.thumbnail,
            "episode": v.episode,
            "season": v.season,
            "overview": v.overview,
        },
        keep=("id", "title", "released", "episode", "season"),
    )


def _meta_to_json(m: StremioMeta) -> dict[str, Any]:
    return _compact(
        {
            "id": m.id,
            "type": m.type,
            "name": m.name,
            "poster": m.poster,
            "background": m.background,
            "logo": m.logo,
            "description": m.description,
            "releaseInfo": m.release_info,
            "imdbRating": m.imdb_rating,
            "genres": m.genres,
            "cast": m.cast,
            "director": m.director,
            "runtime": m.runtime,
            "videos": [_video_to_json(v) for v in m.videos],
        },
        keep=("id", "type", "name", "poster"),
    )


def _stream_to_json(result: RankedResult) -> dict[str, str]:
    return {"name": result.name, "title": result.description, "url": result.url}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    """Serve the Stremio addon manifest."""
    return _json(MANIFEST)


async def _catalog_response(
    request: Request,
    content_type: str,
    catalog_id: str,
    extra: str = "",
) -> JSONResponse:
    ct = _content_type(content_type)
    if ct is None or not catalog_id.startswith(_CATALOG_PREFIX):
        return _json({"metas": []})

    skip, query = _parse_extra(extra)
    log.info(
        "stremio_catalog_request",
        content_type=ct,
        catalog_id=catalog_id,
        skip=skip,
        query=query,
    )

    state = cast(AppState, request.app.state)
    metas = await state.stremio_catalog_uc.catalog(ct, skip=skip, query=query)
    return _json({"metas": [_preview_to_json(m) for m in metas]})


@router.get("/catalog/{content_type}/{catalog_id}.json")
async def stremio_catalog(
    request: Request,
    content_type: str,
    catalog_id: str,
) -> JSONResponse:
    """Serve a Stremio catalog page (popular titles via TMDB)."""
    return await _catalog_response(request, content_type, catalog_id)


@router.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
async def stremio_catalog_extra(
    request: Request,
    content_type: str,
    catalog_id: str,
    extra: str,
) -> JSONResponse:
    """Serve a catalog page with ``skip=`` and/or ``search=`` extras."""
    return await _catalog_response(request, content_type, catalog_id, extra)


@router.get("/meta/{content_type}/{meta_id}.json")
async def stremio_meta(
    request: Request,
    content_type: str,
    meta_id: str,
) -> JSONResponse:
    """Serve full meta (with episode list for series)."""
    ct = _content_type(content_type)
    tmdb_id = _parse_tmdb_id(meta_id)
    if ct is None or tmdb_id is None:
        return _json({"meta": None})

    state = cast(AppState, request.app.state)
    meta = await state.stremio_catalog_uc.meta(tmdb_id, ct)
    if meta is None:
        return _json({"meta": None})
    return _json({"meta": _meta_to_json(meta)})


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Resolve ranked streams for a movie or episode."""
    parsed = _parse_stream_id(content_type, stream_id)
    if parsed is None:
        return _json({"streams": []})

    log.info(
        "stremio_stream_request",
        tmdb_id=parsed.tmdb_id,
        content_type=parsed.content_type,
        season=parsed.season,
        episode=parsed.episode,
    )

    state = cast(AppState, request.app.state)
    results = await state.stremio_stream_uc.execute(parsed)
    return _json({"streams": [_stream_to_json(r) for r in results]})
