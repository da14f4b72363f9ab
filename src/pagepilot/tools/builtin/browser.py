# Browser automation tool for AI agent control
# Changes: Reworked onto BrowserEngine; coordinate clicks, markers and tab stack
#
# Exposes the engine's session-scoped primitives as one name/params tool so an
# orchestration layer can drive the browser without importing the engine.
"""Browser automation tool for agent use."""

from __future__ import annotations

import json
from typing import Any

from pagepilot.browser.engine import get_browser_engine
from pagepilot.browser.marker import MarkerOptions
from pagepilot.tools.protocol import BaseTool


class BrowserTool(BaseTool):
    """Browser automation tool using the shared BrowserEngine.

    Every action returns a JSON object string with a ``success`` flag, or an
    ``Error: ...`` string when required parameters are missing.

    Actions:
        navigate: Go to a URL
        click: Click a point (x, y) or a CSS selector
        type: Type text into the focused element
        clear: Clear the focused element
        scroll: Scroll by dx/dy pixels, or one viewport up/down
        elements: List visible, uncovered elements with their centers
        interactive: List clickable and input controls with visibility flags
        element_at: Describe the interactive element at (x, y)
        mark: Draw numbered overlays on visible interactive elements
        unmark: Remove the overlays
        screenshot: Capture the viewport as base64 JPEG
        cursor: Show or hide the simulated cursor
        close_tab: Close the active tab (never the last one)
        tab_count: Number of open tabs in the session
        close: Close the browser session
    """

    DEFAULT_SESSION_ID = "default"

    ACTIONS = [
        "navigate",
        "click",
        "type",
        "clear",
        "scroll",
        "elements",
        "interactive",
        "element_at",
        "mark",
        "unmark",
        "screenshot",
        "cursor",
        "close_tab",
        "tab_count",
        "close",
    ]

    @property
    def name(self) -> str:
        return "browser"

    @property
    def description(self) -> str:
        return (
            "Control a web browser: navigate, click by coordinate or selector, type, "
            "scroll, list visible interactive elements, draw numbered element markers "
            "and capture viewport screenshots."
        )

    @property
    def trust_level(self) -> str:
        return "high"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "description": "The browser action to perform",
                    "enum": list(self.ACTIONS),
                },
                "url": {"type": "string", "description": "URL for 'navigate'"},
                "x": {"type": "number", "description": "Viewport x for 'click' and 'element_at'"},
                "y": {"type": "number", "description": "Viewport y for 'click' and 'element_at'"},
                "selector": {"type": "string", "description": "CSS selector for 'click'"},
                "text": {"type": "string", "description": "Text for 'type'"},
                "dx": {"type": "number", "description": "Horizontal scroll delta in pixels"},
                "dy": {"type": "number", "description": "Vertical scroll delta in pixels"},
                "direction": {
                    "type": "string",
                    "description": "Scroll one viewport 'up' or 'down' when no deltas are given",
                    "enum": ["up", "down"],
                },
                "max_text_length": {"type": "integer", "description": "Truncate element text for 'elements'"},
                "max_elements": {"type": "integer", "description": "Marker cap for 'mark'"},
                "visible": {"type": "boolean", "description": "Cursor visibility for 'cursor'"},
                "min_wait_ms": {"type": "integer", "description": "Minimum settle time for 'screenshot'"},
                "session_id": {
                    "type": "string",
                    "description": "Browser session ID (optional, uses default if not specified)",
                },
            },
            "required": ["action"],
        }

    async def execute(self, **params: Any) -> str:
        """Execute a browser action.

        Args:
            action: The action to perform
            session_id: Optional session identifier
            **params: Action specific parameters (see ``parameters``)

        Returns:
            JSON result string or an error message
        """
        action = params.get("action")
        session_id = params.get("session_id") or self.DEFAULT_SESSION_ID

        try:
            if action == "navigate":
                return await self._navigate(params, session_id)
            elif action == "click":
                return await self._click(params, session_id)
            elif action == "type":
                return await self._type(params, session_id)
            elif action == "clear":
                return _dump((await get_browser_engine().clear(session_id)).to_dict())
            elif action == "scroll":
                return await self._scroll(params, session_id)
            elif action == "elements":
                return await self._elements(params, session_id)
            elif action == "interactive":
                elements = await get_browser_engine().enumerate_clickable_and_input(session_id)
                return _dump({"success": True, **elements.to_dict()})
            elif action == "element_at":
                return await self._element_at(params, session_id)
            elif action == "mark":
                return await self._mark(params, session_id)
            elif action == "unmark":
                return _dump((await get_browser_engine().remove_element_markers(session_id)).to_dict())
            elif action == "screenshot":
                return await self._screenshot(params, session_id)
            elif action == "cursor":
                return await self._cursor(params, session_id)
            elif action == "close_tab":
                return _dump((await get_browser_engine().close_current_tab(session_id)).to_dict())
            elif action == "tab_count":
                count = get_browser_engine().tab_count(session_id)
                return _dump({"success": True, "tab_count": count})
            elif action == "close":
                await get_browser_engine().close_session(session_id)
                return _dump({"success": True, "message": f"Browser session '{session_id}' closed"})
            else:
                return self._error(f"Unknown action: {action}")

        except Exception as e:
            return self._error(str(e))

    async def _navigate(self, params: dict, session_id: str) -> str:
        url = params.get("url")
        if not url:
            return self._error("url is required for navigate action")
        result = await get_browser_engine().navigator.navigate(session_id, url)
        return _dump(result.to_dict())

    async def _click(self, params: dict, session_id: str) -> str:
        selector = params.get("selector")
        x, y = params.get("x"), params.get("y")
        if selector:
            target: Any = selector
        elif x is not None and y is not None:
            target = (float(x), float(y))
        else:
            return self._error("click needs either x and y or a selector")
        result = await get_browser_engine().click(session_id, target)
        return _dump(result.to_dict())

    async def _type(self, params: dict, session_id: str) -> str:
        text = params.get("text")
        if text is None:
            return self._error("text is required for type action")
        result = await get_browser_engine().type(session_id, text)
        return _dump(result.to_dict())

    async def _scroll(self, params: dict, session_id: str) -> str:
        engine = get_browser_engine()
        dx, dy = params.get("dx"), params.get("dy")
        if dx is not None or dy is not None:
            result = await engine.scroll_by(session_id, float(dx or 0), float(dy or 0))
        elif params.get("direction", "down") == "up":
            result = await engine.scroll_to_prev_chunk(session_id)
        else:
            result = await engine.scroll_to_next_chunk(session_id)
        return _dump(result.to_dict())

    async def _elements(self, params: dict, session_id: str) -> str:
        elements = await get_browser_engine().enumerate_elements(
            session_id, params.get("max_text_length")
        )
        return _dump({"success": True, "elements": [el.to_dict() for el in elements]})

    async def _element_at(self, params: dict, session_id: str) -> str:
        x, y = params.get("x"), params.get("y")
        if x is None or y is None:
            return self._error("x and y are required for element_at action")
        result = await get_browser_engine().element_at_point(session_id, float(x), float(y))
        return _dump(result.to_dict())

    async def _mark(self, params: dict, session_id: str) -> str:
        options = MarkerOptions(max_elements=params.get("max_elements"))
        result = await get_browser_engine().mark_visible_elements(session_id, options)
        return _dump(result.to_dict())

    async def _screenshot(self, params: dict, session_id: str) -> str:
        image = await get_browser_engine().capture(session_id, params.get("min_wait_ms"))
        if image is None:
            return _dump({"success": False, "error": "screenshot failed: no frame available"})
        return _dump({"success": True, "image": image})

    async def _cursor(self, params: dict, session_id: str) -> str:
        visible = params.get("visible")
        if visible is None:
            return self._error("visible is required for cursor action")
        await get_browser_engine().set_cursor_visibility(session_id, bool(visible))
        return _dump({"success": True, "visible": bool(visible)})


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload)


__all__ = ["BrowserTool"]
