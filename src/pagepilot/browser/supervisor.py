# Shared browser process supervisor
# Changes: Initial creation with lazy, lock-guarded launch and explicit shutdown
"""Owns the one Chromium process every session shares."""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Browser, Playwright, async_playwright

from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)


class BrowserSupervisor:
    """Lazily launches the shared browser and tears it down on request.

    ``ensure_browser()`` is safe to call from many sessions at once: the
    first caller launches, the rest wait on the lock and get the same
    ``Browser``. Nothing is cached after a failed launch, so the next call
    retries.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def ensure_browser(self) -> Browser:
        """Return the shared browser, launching it on first use."""
        if self._browser is not None:
            return self._browser

        async with self._lock:
            if self._browser is not None:
                return self._browser

            args = [self._settings.window_size_arg, *self._settings.launch_args]
            playwright = None
            try:
                playwright = await async_playwright().start()
                browser = await playwright.chromium.launch(
                    headless=self._settings.headless,
                    args=args,
                )
            except Exception as e:
                if playwright is not None:
                    try:
                        await playwright.stop()
                    except Exception as stop_error:
                        logger.debug("Playwright stop after failed launch: %s", stop_error)
                logger.error("Browser launch failed: %s", e)
                raise BrowserLaunchError(f"Could not launch browser: {e}") from e

            self._playwright = playwright
            self._browser = browser
            logger.info("Browser launched (headless=%s)", self._settings.headless)
            return browser

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright. Safe to call repeatedly."""
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None

            if browser is not None:
                try:
                    await browser.close()
                except Exception as e:
                    logger.warning("Error closing browser: %s", e)
            if playwright is not None:
                try:
                    await playwright.stop()
                except Exception as e:
                    logger.warning("Error stopping Playwright: %s", e)
            if browser is not None:
                logger.info("Browser shut down")


__all__ = ["BrowserSupervisor"]
