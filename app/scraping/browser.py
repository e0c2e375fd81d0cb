"""
Headless browser sessions for platform adapters.

Every call to ``open_page`` launches its own browser and tears it down on
exit, so concurrent runs never share browser state.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Protocol

from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class BrowserPage(Protocol):
    """
    The subset of a Playwright page used by adapters.
    """

    @property
    def url(self) -> str:
        ...

    async def goto(self, url: str, *, wait_until: str = "domcontentloaded") -> Any:
        ...

    async def wait_for_selector(self, selector: str) -> Any:
        ...

    async def content(self) -> str:
        ...


class BrowserSessionFactory(Protocol):
    def open_page(self, *, user_agent: str) -> AbstractAsyncContextManager[BrowserPage]:
        ...


class PlaywrightSessionFactory:
    """
    Launches an isolated headless Chromium per session.
    """

    def __init__(self, *, headless: bool = True, navigation_timeout_seconds: float = 30.0) -> None:
        self._headless = headless
        self._timeout_ms = max(1.0, navigation_timeout_seconds) * 1000

    @asynccontextmanager
    async def open_page(self, *, user_agent: str) -> AsyncIterator[BrowserPage]:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=self._headless,
                args=list(CHROMIUM_ARGS),
            )
            try:
                context = await browser.new_context(user_agent=user_agent)
                page = await context.new_page()
                page.set_default_timeout(self._timeout_ms)
                page.set_default_navigation_timeout(self._timeout_ms)
                yield page
            finally:
                await browser.close()
                logger.debug("Browser session closed")
