# Screenshot service
# Changes: Initial creation with readiness gating and a minimum settle time
#
# Readiness is advisory: the three signals are awaited together, each with its
# own timeout, and a capture happens whether or not they resolve.
"""Readiness-gated viewport captures, optionally with elements or markers."""

from __future__ import annotations

import asyncio
import base64
import logging
import time

from pagepilot.browser import scripts
from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.inspector import ElementInspector
from pagepilot.browser.marker import MarkerOptions, VisualMarker
from pagepilot.browser.models import MarkedScreenshot, PageInference
from pagepilot.browser.registry import SessionRegistry
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ScreenshotService:
    """Captures JPEG frames of a session's visible viewport."""

    def __init__(
        self,
        registry: SessionRegistry,
        inspector: ElementInspector,
        marker: VisualMarker,
        settings: Settings | None = None,
    ) -> None:
        self._registry = registry
        self._inspector = inspector
        self._marker = marker
        self._settings = settings or get_settings()

    async def capture(self, session_id: str, min_wait_ms: int | None = None) -> str | None:
        """Capture the viewport as base64 JPEG.

        Never returns before ``min_wait_ms`` has passed since the call began,
        even if the page was ready immediately.

        Returns:
            Base64 string, or None when no frame could be taken (for
            example because the tab closed). None is not an empty image.
        """
        floor_ms = self._settings.min_screenshot_wait_ms if min_wait_ms is None else min_wait_ms
        start = time.monotonic()

        try:
            page = await self._registry.get_active_tab(session_id)
            await self._await_readiness(page)
            await self._sleep_until(start, floor_ms)

            buffer = await page.screenshot(
                type="jpeg",
                quality=self._settings.screenshot_quality,
                full_page=False,
                timeout=self._settings.screenshot_timeout_ms,
            )
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Screenshot failed for session %s: %s", session_id, e)
            return None

        return base64.b64encode(buffer).decode("ascii")

    async def _await_readiness(self, page) -> None:
        timeout = self._settings.readiness_timeout_ms
        results = await asyncio.gather(
            page.wait_for_load_state("load", timeout=timeout),
            page.wait_for_load_state("networkidle", timeout=timeout),
            page.wait_for_function(scripts.READY_STATE_COMPLETE, timeout=timeout),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.debug("Readiness signal skipped: %s", result)

    @staticmethod
    async def _sleep_until(start: float, floor_ms: int) -> None:
        deadline = start + floor_ms / 1000
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            await asyncio.sleep(remaining)

    async def capture_and_infer(self, session_id: str) -> PageInference | None:
        """Capture a frame together with the page's controls and scroll state."""
        image = await self.capture(session_id)
        if image is None:
            return None

        elements = await self._inspector.enumerate_clickable_and_input(session_id)

        scroll_state: dict = {}
        try:
            page = await self._registry.get_active_tab(session_id)
            scroll_state = await page.evaluate(scripts.SCROLL_STATE_SCRIPT) or {}
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Reading scroll state failed for session %s: %s", session_id, e)

        return PageInference(
            image=image,
            elements=elements.combined(),
            scroll_position=scroll_state.get("position", 0),
            total_scroll=scroll_state.get("total", 0),
        )

    async def take_marked_screenshot(
        self,
        session_id: str,
        options: MarkerOptions | None = None,
        min_wait_ms: int | None = None,
        remove_after: bool = False,
    ) -> MarkedScreenshot:
        """Mark visible elements, capture, and optionally clean up the overlays."""
        mark_result = await self._marker.mark_visible_elements(session_id, options)
        image = await self.capture(session_id, min_wait_ms)

        if remove_after:
            await self._marker.remove_element_markers(session_id)

        return MarkedScreenshot(image=image, elements=mark_result.elements)


__all__ = ["ScreenshotService"]
