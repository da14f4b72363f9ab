# Navigation helpers
# Changes: Initial creation with goto, history moves, reload and wait
"""URL-level actions for a session's active tab."""

from __future__ import annotations

from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.models import ActionResult
from pagepilot.browser.registry import SessionRegistry


class Navigator:
    """Navigate, reload and move through history on the active tab."""

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def navigate(self, session_id: str, url: str) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.goto(url)
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("navigate", e)
        return ActionResult.ok(url=page.url)

    async def get_current_url(self, session_id: str) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            return ActionResult.ok(url=page.url)
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("get url", e)

    async def wait(self, session_id: str, seconds: float) -> ActionResult:
        """Pause on the page's own clock for the given number of seconds."""
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.wait_for_timeout(seconds * 1000)
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("wait", e)
        return ActionResult.ok()

    async def reload(self, session_id: str) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.reload()
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("reload", e)
        return ActionResult.ok(url=page.url)

    async def go_back(self, session_id: str) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.go_back()
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("go back", e)
        return ActionResult.ok(url=page.url)

    async def go_forward(self, session_id: str) -> ActionResult:
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.go_forward()
        except BrowserLaunchError:
            raise
        except Exception as e:
            return ActionResult.fail("go forward", e)
        return ActionResult.ok(url=page.url)


__all__ = ["Navigator"]
