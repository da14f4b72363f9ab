# Element inspector
# Changes: Initial creation with element scan, clickable/input split and hit testing
"""In-page queries that find and describe what a person could see and click."""

from __future__ import annotations

import logging

from pagepilot.browser import scripts
from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.models import (
    ActionResult,
    ElementDetails,
    ElementSummary,
    InteractiveElement,
    PageElements,
)
from pagepilot.browser.registry import SessionRegistry

logger = logging.getLogger(__name__)


class ElementInspector:
    """Enumerates and describes page elements for one session's active tab.

    Every query runs a single ``page.evaluate``. Evaluation errors are
    logged and degrade to an empty result; only a browser launch failure
    propagates.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def enumerate_elements(
        self,
        session_id: str,
        max_text_length: int | None = None,
    ) -> list[ElementSummary]:
        """List elements that are rendered, in the viewport and not covered.

        Args:
            session_id: Session whose active tab is scanned
            max_text_length: Truncate text beyond this many characters

        Returns:
            Element summaries in document order
        """
        try:
            page = await self._registry.get_active_tab(session_id)
            raw = await page.evaluate(scripts.ENUMERATE_ELEMENTS_SCRIPT, max_text_length or 0)
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Element scan failed for session %s: %s", session_id, e)
            return []

        return [ElementSummary.from_dict(item) for item in raw or []]

    async def enumerate_clickable_and_input(self, session_id: str) -> PageElements:
        """Split rendered controls into clickable and input elements.

        Unlike ``enumerate_elements`` nothing is dropped for being off screen
        or covered; ``in_viewport`` and ``visually_exposed`` report it instead.
        """
        try:
            page = await self._registry.get_active_tab(session_id)
            raw = await page.evaluate(scripts.CLICKABLE_AND_INPUT_SCRIPT)
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Interactive element scan failed for session %s: %s", session_id, e)
            return PageElements()

        raw = raw or {}
        return PageElements(
            clickable=[InteractiveElement.from_dict(item) for item in raw.get("clickableElements", [])],
            inputs=[InteractiveElement.from_dict(item) for item in raw.get("inputElements", [])],
        )

    async def element_at_point(self, session_id: str, x: float, y: float) -> ActionResult:
        """Describe the interactive element at (x, y), walking up from the hit node."""
        try:
            page = await self._registry.get_active_tab(session_id)
            raw = await page.evaluate(scripts.ELEMENT_AT_POINT_SCRIPT, [x, y])
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Hit test at (%s, %s) failed for session %s: %s", x, y, session_id, e)
            return ActionResult.fail("element lookup", e)

        if not raw:
            return ActionResult(
                success=False,
                error=f"element lookup failed: no interactive element found at ({x}, {y})",
            )
        return ActionResult.ok(element=ElementDetails.from_dict(raw).to_dict())

    async def check_element_visibility(self, session_id: str, x: float, y: float) -> ActionResult:
        """Report whether the element at (x, y) is outside the viewport vertically.

        An element that needs scrolling is smoothly scrolled into view.
        """
        try:
            page = await self._registry.get_active_tab(session_id)
            raw = await page.evaluate(scripts.CHECK_VISIBILITY_SCRIPT, [x, y])
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Visibility check failed for session %s: %s", session_id, e)
            return ActionResult.fail("visibility check", e)

        if not raw:
            return ActionResult(
                success=False,
                error=f"visibility check failed: no element found at ({x}, {y})",
            )
        return ActionResult.ok(top=raw.get("top"), needs_scrolling=bool(raw.get("needsScrolling")))


__all__ = ["ElementInspector"]
