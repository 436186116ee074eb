"""Headless Chromium rendering engine using Playwright.

Each conversion owns a dedicated browser process for its whole duration.
The browser and the Playwright driver are torn down on every exit path:
success, engine failure, timeout and task cancellation.

Based on Playwright for Python async API:
https://playwright.dev/python/docs/api/class-page#page-pdf
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from services.documents.errors import RenderFailure, RenderTimeout
from services.shared.config import Settings

logger = logging.getLogger(__name__)

PDF_OPTIONS: dict[str, Any] = {
    "format": "A4",
    "print_background": True,
    "margin": {
        "top": "20mm",
        "right": "15mm",
        "bottom": "20mm",
        "left": "15mm",
    },
}


class BrowserEngine:
    """Converts HTML pages to paginated PDF documents."""

    def __init__(self, settings: Settings) -> None:
        """Initialize rendering engine.

        Args:
            settings: Application settings with rendering configuration
        """
        self.settings = settings

    @asynccontextmanager
    async def launch(self) -> AsyncIterator[Browser]:
        """Start a headless browser scoped to the ``async with`` block."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                args=list(self.settings.browser_args),
            )
            try:
                yield browser
            finally:
                await browser.close()
                logger.debug("Browser closed")

    async def _paint(self, page: Page, html: str) -> bytes:
        await page.set_content(
            html,
            wait_until="networkidle",
            timeout=self.settings.render_timeout_seconds * 1000,
        )
        return await page.pdf(**PDF_OPTIONS)

    async def _print(self, html: str) -> bytes:
        async with self.launch() as browser:
            context = await browser.new_context(locale=self.settings.render_locale)
            page = await context.new_page()
            return await self._paint(page, html)

    async def html_to_pdf(self, html: str) -> bytes:
        """Render an HTML document to PDF bytes.

        Args:
            html: Complete HTML document

        Returns:
            PDF document bytes

        Raises:
            RenderTimeout: If rendering exceeds settings.render_timeout_seconds
            RenderFailure: If the browser cannot start, crashes or returns nothing
        """
        timeout = self.settings.render_timeout_seconds

        try:
            pdf = await asyncio.wait_for(self._print(html), timeout=timeout)
        except (asyncio.TimeoutError, PlaywrightTimeoutError):
            logger.error(f"Rendering timed out after {timeout}s")
            raise RenderTimeout(timeout) from None
        except Exception as e:
            logger.error(f"Rendering engine failed: {e}")
            raise RenderFailure(f"Rendering engine failed: {e}") from e

        if not pdf:
            raise RenderFailure("Rendering engine returned an empty document")

        return pdf
