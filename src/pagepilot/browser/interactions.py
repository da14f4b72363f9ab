# Interaction primitives
# Changes: Selector clicks share one timeout budget between lookup and click
"""Session-scoped input actions that always resolve to an ActionResult."""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Mapping, Sequence
from typing import Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagepilot.browser import scripts
from pagepilot.browser.cursor import CursorSimulator
from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.models import ActionResult, BoundingBox, Coordinates
from pagepilot.browser.registry import SessionRegistry
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)

ClickTarget = Union[str, Coordinates, Sequence[float], Mapping[str, float]]


def to_coordinates(target: Coordinates | Sequence[float] | Mapping[str, float]) -> Coordinates:
    """Normalize an (x, y) pair, an {"x", "y"} mapping or Coordinates."""
    if isinstance(target, Coordinates):
        return target
    if isinstance(target, Mapping):
        return Coordinates(x=target["x"], y=target["y"])
    if isinstance(target, Sequence) and len(target) == 2:
        return Coordinates(x=target[0], y=target[1])
    raise TypeError(f"unsupported click target: {target!r}")


def select_all_shortcut() -> str:
    """Select-all chord for the platform the browser runs on."""
    modifier = "Meta" if sys.platform == "darwin" else "Control"
    return f"{modifier}+A"


class InteractionPrimitives:
    """Click, type, clear, scroll and close-tab against a session's active tab.

    Errors are folded into ``ActionResult(success=False)`` with a message
    naming the operation. Only ``BrowserLaunchError`` propagates.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        cursor: CursorSimulator,
        settings: Settings | None = None,
    ) -> None:
        self._registry = registry
        self._cursor = cursor
        self._settings = settings or get_settings()

    async def click(self, session_id: str, target: ClickTarget) -> ActionResult:
        """Click a CSS selector or an exact viewport point.

        For a selector the cursor is placed at the element's current center
        before Playwright clicks it; for a point the cursor moves first and
        the mouse clicks whatever is topmost there. A selector click gets
        one ``readiness_timeout_ms`` budget shared by the lookup and the
        click itself.
        """
        try:
            page = await self._registry.get_active_tab(session_id)
            if isinstance(target, str):
                deadline = time.monotonic() + self._settings.readiness_timeout_ms / 1000
                center = await self._selector_center(page, target)
                if center is not None:
                    await self._cursor.move_to(session_id, center.x, center.y)
                # Playwright treats timeout=0 as "no timeout"
                remaining_ms = max(1, round((deadline - time.monotonic()) * 1000))
                await page.click(target, timeout=remaining_ms)
            else:
                point = to_coordinates(target)
                await self._cursor.move_to(session_id, point.x, point.y)
                await page.mouse.click(point.x, point.y)
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.debug("Click on %r failed in session %s: %s", target, session_id, e)
            return ActionResult.fail("click", e)
        return ActionResult.ok()

    async def _selector_center(self, page, selector: str) -> Coordinates | None:
        try:
            box = await page.locator(selector).first.bounding_box(
                timeout=self._settings.readiness_timeout_ms
            )
        except PlaywrightTimeoutError:
            return None
        return BoundingBox.from_dict(box).center if box else None

    async def type(self, session_id: str, text: str) -> ActionResult:
        """Send keystrokes to whatever element holds focus."""
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.keyboard.type(text)
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("type", e)
        return ActionResult.ok()

    async def clear(self, session_id: str) -> ActionResult:
        """Select all and delete in the focused element."""
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.keyboard.press(select_all_shortcut())
            await page.keyboard.press("Backspace")
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("clear", e)
        return ActionResult.ok()

    async def scroll_by(self, session_id: str, dx: float, dy: float) -> ActionResult:
        """Scroll by a pixel delta; the cursor moves the opposite way vertically."""
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.evaluate(scripts.SCROLL_BY_SCRIPT, [dx, dy])
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("scroll", e)

        await self._cursor.shift_vertical(session_id, -dy)
        return ActionResult.ok()

    async def scroll_to_next_chunk(self, session_id: str) -> ActionResult:
        return await self._scroll_chunk(session_id, 1)

    async def scroll_to_prev_chunk(self, session_id: str) -> ActionResult:
        return await self._scroll_chunk(session_id, -1)

    async def _scroll_chunk(self, session_id: str, direction: int) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.evaluate(scripts.SCROLL_CHUNK_SCRIPT, direction)
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("scroll", e)

        await self._cursor.shift_by_viewport(session_id, -direction)
        return ActionResult.ok()

    async def close_current_tab(self, session_id: str) -> ActionResult:
        """Close the active tab; refuses when it is the session's last one."""
        return await self._registry.close_active_tab(session_id)


__all__ = ["ClickTarget", "to_coordinates", "select_all_shortcut", "InteractionPrimitives"]
