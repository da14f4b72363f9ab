# Cursor simulator
# Changes: Initial creation
#
# The cursor is a fixed-position dot in the page. Its position lives only on
# the element itself (dataset.x / dataset.y); the server keeps nothing but the
# per-session visibility flag held by the registry.
"""A visible stand-in for the mouse pointer, for recordings and screenshots."""

from __future__ import annotations

import logging

from pagepilot.browser import scripts
from pagepilot.browser.registry import SessionRegistry

logger = logging.getLogger(__name__)


class CursorSimulator:
    """Keeps a synthetic pointer in step with real synthetic input.

    It never dispatches input itself. While a session's cursor is hidden,
    moves and shifts are skipped without touching the page.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    def is_visible(self, session_id: str) -> bool:
        return self._registry.is_cursor_visible(session_id)

    async def set_visibility(self, session_id: str, visible: bool) -> None:
        """Switch the cursor on or off for a session."""
        self._registry.set_cursor_visible(session_id, visible)

        page = self._registry.active_tab(session_id)
        if page is None:
            return
        try:
            await page.evaluate(scripts.SET_CURSOR_VISIBILITY_SCRIPT, visible)
        except Exception as e:
            logger.debug("Could not toggle cursor element: %s", e)

    async def move_to(self, session_id: str, x: float, y: float) -> None:
        """Animate the cursor to (x, y) with a short click pulse."""
        if not self.is_visible(session_id):
            return
        page = self._registry.active_tab(session_id)
        if page is None:
            return
        try:
            await page.evaluate(scripts.MOVE_CURSOR_SCRIPT, [x, y])
        except Exception as e:
            logger.debug("Cursor move failed: %s", e)

    async def shift_vertical(self, session_id: str, dy: float) -> None:
        """Move the remembered vertical offset by dy pixels, without animation."""
        await self._shift(session_id, {"dy": dy, "viewportFactor": 0})

    async def shift_by_viewport(self, session_id: str, factor: int) -> None:
        """Move the remembered vertical offset by factor * viewport height."""
        await self._shift(session_id, {"dy": 0, "viewportFactor": factor})

    async def _shift(self, session_id: str, arg: dict) -> None:
        if not self.is_visible(session_id):
            return
        page = self._registry.active_tab(session_id)
        if page is None:
            return
        try:
            await page.evaluate(scripts.SHIFT_CURSOR_SCRIPT, arg)
        except Exception as e:
            logger.debug("Cursor shift failed: %s", e)


__all__ = ["CursorSimulator"]
