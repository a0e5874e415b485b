"""Single shared Chromium session for search page rendering.

One browser, one context and one page are kept alive for the whole
process.  Launch is lazy and guarded by an asyncio lock, so concurrent
first callers wait for the same instance.  A crashed browser is
relaunched on the next call.
"""

from __future__ import annotations

import asyncio

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from ezstremio.infrastructure.prehraj.constants import SEARCH_USER_AGENT

log = structlog.get_logger(__name__)


class BrowserSession:
    """Owns the Playwright driver, browser, context and page.

    Usage::

        session = BrowserSession(headless=True)
        page = await session.page()
        ...
        await session.cleanup()
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        user_agent: str = SEARCH_USER_AGENT,
        executable_path: str | None = None,
    ) -> None:
        self._headless = headless
        self._user_agent = user_agent
        self._executable_path = executable_path
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def _launch(self) -> None:
        if self._pw is not None:
            try:
                await self._pw.stop()
            except Exception:  # noqa: BLE001
                log.debug("browser_session_stale_stop_error", exc_info=True)
        self._pw = None
        self._browser = None
        self._context = None
        self._page = None

        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(
            headless=self._headless,
            executable_path=self._executable_path,
        )
        self._context = await self._browser.new_context(
            user_agent=self._user_agent,
            viewport={"width": 1280, "height": 720},
        )
        log.info(
            "browser_session_launched",
            headless=self._headless,
            executable_path=self._executable_path,
        )

    async def page(self) -> Page:
        """Return the shared page, launching or relaunching as needed."""
        async with self._lock:
            if not self.is_running:
                await self._launch()
            assert self._context is not None
            if self._page is None or self._page.is_closed():
                self._page = await self._context.new_page()
            return self._page

    async def cleanup(self) -> None:
        """Close the browser and stop the driver."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception:  # noqa: BLE001
                log.warning("browser_session_close_error", exc_info=True)
            self._browser = None
            self._context = None
            self._page = None
        if self._pw is not None:
            try:
                await self._pw.stop()
            except Exception:  # noqa: BLE001
                log.warning("browser_session_pw_stop_error", exc_info=True)
            self._pw = None
        log.info("browser_session_closed")
