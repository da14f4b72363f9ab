# Browser engine facade
# Changes: shutdown() releases the shared engine so a new event loop gets a fresh one
"""One object that owns a browser process and every service built on it."""

from __future__ import annotations

import logging
import random
import string
import time

from playwright.async_api import Browser, Page

from pagepilot.browser.cursor import CursorSimulator
from pagepilot.browser.inspector import ElementInspector
from pagepilot.browser.interactions import ClickTarget, InteractionPrimitives
from pagepilot.browser.marker import MarkerOptions, VisualMarker
from pagepilot.browser.models import (
    ActionResult,
    ElementSummary,
    MarkResult,
    PageElements,
)
from pagepilot.browser.navigation import Navigator
from pagepilot.browser.registry import SessionRegistry
from pagepilot.browser.screenshot import ScreenshotService
from pagepilot.browser.supervisor import BrowserSupervisor
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


class BrowserEngine:
    """Explicitly constructed engine; build one per program (or per test).

    The services are exposed as attributes for callers that need the full
    surface; the most common operations are also delegated directly.

    Usage:
        async with BrowserEngine() as engine:
            session_id = await engine.create_session()
            await engine.navigator.navigate(session_id, "https://example.com")
            frame = await engine.capture(session_id)
    """

    def __init__(self, settings: Settings | None = None, rng: random.Random | None = None) -> None:
        self.settings = settings or get_settings()
        self._rng = rng or random.Random()

        self.supervisor = BrowserSupervisor(self.settings)
        self.registry = SessionRegistry(self.supervisor, self.settings)
        self.inspector = ElementInspector(self.registry)
        self.marker = VisualMarker(self.registry, self.settings, self._rng)
        self.cursor = CursorSimulator(self.registry)
        self.interactions = InteractionPrimitives(self.registry, self.cursor, self.settings)
        self.navigator = Navigator(self.registry)
        self.screenshots = ScreenshotService(self.registry, self.inspector, self.marker, self.settings)

    async def __aenter__(self) -> BrowserEngine:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()

    # =========================================================================
    # Process and sessions
    # =========================================================================

    async def ensure_browser(self) -> Browser:
        return await self.supervisor.ensure_browser()

    def new_session_id(self) -> str:
        """Millisecond timestamp followed by a random base36 suffix."""
        suffix = "".join(self._rng.choice(_BASE36) for _ in range(13))
        return f"{int(time.time() * 1000)}{suffix}"

    async def create_session(self) -> str:
        """Create a session with its first tab open and return its id."""
        session_id = self.new_session_id()
        await self.registry.get_active_tab(session_id)
        logger.info("Created session %s", session_id)
        return session_id

    async def get_active_tab(self, session_id: str) -> Page:
        return await self.registry.get_active_tab(session_id)

    def tab_count(self, session_id: str) -> int:
        return self.registry.tab_count(session_id)

    async def close_active_tab(self, session_id: str) -> ActionResult:
        return await self.registry.close_active_tab(session_id)

    async def close_session(self, session_id: str) -> None:
        await self.registry.close_session(session_id)

    async def shutdown(self) -> None:
        """Close the browser; every session is invalid afterwards.

        If this is the shared engine from ``get_browser_engine()`` it is
        also released, so the next call builds a fresh one.
        """
        global _instance  # noqa: PLW0603
        if _instance is self:
            _instance = None
        await self.registry.shutdown_all()

    # =========================================================================
    # Perception
    # =========================================================================

    async def enumerate_elements(
        self, session_id: str, max_text_length: int | None = None
    ) -> list[ElementSummary]:
        return await self.inspector.enumerate_elements(session_id, max_text_length)

    async def enumerate_clickable_and_input(self, session_id: str) -> PageElements:
        return await self.inspector.enumerate_clickable_and_input(session_id)

    async def element_at_point(self, session_id: str, x: float, y: float) -> ActionResult:
        return await self.inspector.element_at_point(session_id, x, y)

    async def mark_visible_elements(
        self, session_id: str, options: MarkerOptions | None = None
    ) -> MarkResult:
        return await self.marker.mark_visible_elements(session_id, options)

    async def remove_element_markers(self, session_id: str) -> ActionResult:
        return await self.marker.remove_element_markers(session_id)

    async def capture(self, session_id: str, min_wait_ms: int | None = None) -> str | None:
        return await self.screenshots.capture(session_id, min_wait_ms)

    # =========================================================================
    # Input
    # =========================================================================

    async def click(self, session_id: str, target: ClickTarget) -> ActionResult:
        return await self.interactions.click(session_id, target)

    async def type(self, session_id: str, text: str) -> ActionResult:
        return await self.interactions.type(session_id, text)

    async def clear(self, session_id: str) -> ActionResult:
        return await self.interactions.clear(session_id)

    async def scroll_by(self, session_id: str, dx: float, dy: float) -> ActionResult:
        return await self.interactions.scroll_by(session_id, dx, dy)

    async def scroll_to_next_chunk(self, session_id: str) -> ActionResult:
        return await self.interactions.scroll_to_next_chunk(session_id)

    async def scroll_to_prev_chunk(self, session_id: str) -> ActionResult:
        return await self.interactions.scroll_to_prev_chunk(session_id)

    async def close_current_tab(self, session_id: str) -> ActionResult:
        return await self.interactions.close_current_tab(session_id)

    async def set_cursor_visibility(self, session_id: str, visible: bool) -> None:
        await self.cursor.set_visibility(session_id, visible)


_instance: BrowserEngine | None = None


def get_browser_engine() -> BrowserEngine:
    """Get or create the process-wide engine used by the browser tool.

    The engine's lock and Playwright handles belong to the event loop that
    first used it. Call ``shutdown()`` before that loop ends; a later loop
    then gets a new engine instead of the stale one.
    """
    global _instance  # noqa: PLW0603
    if _instance is None:
        _instance = BrowserEngine()
    return _instance


__all__ = ["BrowserEngine", "get_browser_engine"]
