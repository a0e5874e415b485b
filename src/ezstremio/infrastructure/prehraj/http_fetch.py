"""httpx page fetching with errors mapped to ``FetchError``."""

from __future__ import annotations

import httpx
import structlog

from ezstremio.domain.exceptions import FetchError

log = structlog.get_logger(__name__)


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    *,
    user_agent: str,
    context: str = "",
) -> str:
    """GET *url* and return the body text.

    Raises:
        FetchError: on timeout, transport error or any status other than 200.
    """
    try:
        resp = await client.get(url, headers={"User-Agent": user_agent})
    except httpx.TimeoutException as exc:
        log.debug("prehraj_fetch_timeout", url=url, context=context)
        raise FetchError(f"timeout fetching {url}") from exc
    except httpx.HTTPError as exc:
        log.debug("prehraj_fetch_error", url=url, context=context, error=str(exc))
        raise FetchError(f"error fetching {url}: {exc}") from exc

    if resp.status_code != 200:
        log.debug(
            "prehraj_http_error",
            url=url,
            status=resp.status_code,
            context=context,
        )
        raise FetchError(f"{url} returned status {resp.status_code}")
    return resp.text
