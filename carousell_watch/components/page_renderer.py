"""
Page rendering component for the Carousell Watch system.

Listing pages are built client-side, so sources are loaded in a headless
Chromium browser. One browser, context and page are shared by every source
of a run.
"""

import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from ..models.config import BrowserSettings
from ..utils.error_handling import SourceRenderError
from .listing_extractor import RenderedPage

logger = logging.getLogger(__name__)


class PlaywrightPageRenderer:
    """Renders source URLs with Playwright.

    Use as an async context manager::

        async with PlaywrightPageRenderer(settings) as renderer:
            page = await renderer.render(url)
    """

    def __init__(self, settings: Optional[BrowserSettings] = None):
        self.settings = settings or BrowserSettings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def start(self) -> None:
        """Launch the browser and open the shared page."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.settings.headless)
        self._context = await self._browser.new_context(user_agent=self.settings.user_agent)
        self._page = await self._context.new_page()
        logger.debug("Chromium started for page rendering")

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = self._context = self._browser = self._playwright = None

    async def __aenter__(self) -> "PlaywrightPageRenderer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def render(self, url: str) -> RenderedPage:
        """
        Navigate to a URL and return the rendered page.

        Args:
            url: Source URL

        Returns:
            RenderedPage with the final URL and the page HTML

        Raises:
            SourceRenderError: If navigation fails or times out
        """
        if self._page is None:
            raise SourceRenderError(url, "renderer is not started")

        try:
            await self._page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout_ms,
            )
            # client-side rendering of listing cards
            await self._page.wait_for_timeout(self.settings.settle_ms)
            html = await self._page.content()
        except PlaywrightError as e:
            raise SourceRenderError(url, e.message) from e

        return RenderedPage(url=self._page.url, html=html)
