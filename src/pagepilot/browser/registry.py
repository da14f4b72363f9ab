# Session and tab registry
# Changes: Initial creation with event-driven LIFO tab stacks per session
#
# A click can open a tab the caller never asked for, so the registry listens
# to Playwright's "page" and "close" events instead of tracking tabs only on
# request. Both callbacks are turned into TabEvent messages and handled by a
# single dispatch() method that owns every mutation of a tab stack.
"""Maps session ids to isolated browser contexts and their tab stacks."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from playwright.async_api import BrowserContext, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagepilot.browser.models import ActionResult
from pagepilot.browser.supervisor import BrowserSupervisor
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)


class TabEventKind(str, Enum):
    OPENED = "opened"
    CLOSED = "closed"


@dataclass(frozen=True)
class TabEvent:
    """A tab lifecycle notification coming from the browser."""

    kind: TabEventKind
    session_id: str
    page: Page


@dataclass
class SessionState:
    """Everything one session owns: its context and its tab stack.

    The last element of ``tabs`` is the active tab.
    """

    session_id: str
    context: BrowserContext
    tabs: list[Page] = field(default_factory=list)
    pending_loads: set[asyncio.Task] = field(default_factory=set)

    @property
    def active_tab(self) -> Page | None:
        return self.tabs[-1] if self.tabs else None


class SessionRegistry:
    """Session to context/tab-stack registry.

    Usage:
        registry = SessionRegistry(BrowserSupervisor())
        page = await registry.get_active_tab("run-42")
        ...
        await registry.close_session("run-42")
    """

    def __init__(self, supervisor: BrowserSupervisor, settings: Settings | None = None) -> None:
        self._supervisor = supervisor
        self._settings = settings or get_settings()
        self._sessions: dict[str, SessionState] = {}
        self._creation_locks: dict[str, asyncio.Lock] = {}
        self._cursor_visibility: dict[str, bool] = {}

    # =========================================================================
    # Active tab
    # =========================================================================

    async def get_active_tab(self, session_id: str) -> Page:
        """Return the session's active tab, creating context and tab if needed.

        Raises:
            BrowserLaunchError: if the shared browser cannot be started.
        """
        state = self._sessions.get(session_id)
        if state is not None and state.tabs:
            return state.tabs[-1]

        lock = self._creation_locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            state = self._sessions.get(session_id)
            if state is not None and state.tabs:
                return state.tabs[-1]

            if state is None:
                state = await self._create_session_state(session_id)

            page = await state.context.new_page()
            # The context's "page" hook normally got here first; dispatch is idempotent
            self.dispatch(TabEvent(TabEventKind.OPENED, session_id, page))
            return state.tabs[-1]

    def active_tab(self, session_id: str) -> Page | None:
        """Peek at the active tab without creating anything."""
        state = self._sessions.get(session_id)
        return state.active_tab if state else None

    async def _create_session_state(self, session_id: str) -> SessionState:
        browser = await self._supervisor.ensure_browser()
        context = await browser.new_context(viewport=self._settings.viewport)
        state = SessionState(session_id=session_id, context=context)
        self._sessions[session_id] = state

        context.on(
            "page",
            lambda page: self.dispatch(TabEvent(TabEventKind.OPENED, session_id, page)),
        )
        logger.debug("Created browser context for session %s", session_id)
        return state

    # =========================================================================
    # Tab events
    # =========================================================================

    def dispatch(self, event: TabEvent) -> None:
        """Apply a tab event to its session's stack."""
        state = self._sessions.get(event.session_id)
        if state is None:
            return

        if event.kind is TabEventKind.OPENED:
            self._on_tab_opened(state, event.page)
        else:
            self._on_tab_closed(state, event.page)

    def _on_tab_opened(self, state: SessionState, page: Page) -> None:
        if any(tab is page for tab in state.tabs):
            return

        state.tabs.append(page)
        session_id = state.session_id
        page.on(
            "close",
            lambda _page: self.dispatch(TabEvent(TabEventKind.CLOSED, session_id, page)),
        )
        logger.debug("Session %s: tab opened (depth %d)", session_id, len(state.tabs))

        task = asyncio.get_running_loop().create_task(self._await_initial_load(page))
        state.pending_loads.add(task)
        task.add_done_callback(state.pending_loads.discard)

    def _on_tab_closed(self, state: SessionState, page: Page) -> None:
        remaining = [tab for tab in state.tabs if tab is not page]
        if len(remaining) == len(state.tabs):
            return
        state.tabs[:] = remaining
        logger.debug("Session %s: tab closed (depth %d)", state.session_id, len(state.tabs))

    async def _await_initial_load(self, page: Page) -> None:
        try:
            await page.wait_for_load_state(
                "domcontentloaded",
                timeout=self._settings.new_tab_load_timeout_ms,
            )
        except PlaywrightTimeoutError:
            logger.debug("New tab did not finish loading in time, continuing")
        except Exception as e:
            # Usually the tab closed before it loaded
            logger.debug("Waiting for new tab load failed: %s", e)

    # =========================================================================
    # Tab and session lifecycle
    # =========================================================================

    async def close_active_tab(self, session_id: str) -> ActionResult:
        """Close the top tab. A session always keeps at least one tab."""
        state = self._sessions.get(session_id)
        if state is None:
            return ActionResult.fail("close tab", f"no such session '{session_id}'")
        if not state.tabs:
            return ActionResult.fail("close tab", f"session '{session_id}' has no open tabs")
        if len(state.tabs) == 1:
            return ActionResult.fail(
                "close tab",
                f"session '{session_id}' has only one tab open",
            )

        page = state.tabs[-1]
        try:
            await page.close()
        except Exception as e:
            logger.warning("Closing tab in session %s failed: %s", session_id, e)
            return ActionResult.fail("close tab", e)

        # Normally the "close" hook already popped it; dispatch is idempotent
        self.dispatch(TabEvent(TabEventKind.CLOSED, session_id, page))
        return ActionResult.ok(tab_count=len(state.tabs))

    def tab_count(self, session_id: str) -> int:
        state = self._sessions.get(session_id)
        return len(state.tabs) if state else 0

    def tabs(self, session_id: str) -> list[Page]:
        """Snapshot of the session's tab stack, bottom first."""
        state = self._sessions.get(session_id)
        return list(state.tabs) if state else []

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    async def close_session(self, session_id: str) -> None:
        """Close every tab, then the context, then forget the session."""
        state = self._sessions.pop(session_id, None)
        self._creation_locks.pop(session_id, None)
        self._cursor_visibility.pop(session_id, None)
        if state is None:
            return

        for task in list(state.pending_loads):
            task.cancel()

        for page in reversed(state.tabs):
            try:
                await page.close()
            except Exception as e:
                logger.warning("Error closing tab in session %s: %s", session_id, e)
        state.tabs.clear()

        try:
            await state.context.close()
        except Exception as e:
            logger.warning("Error closing context for session %s: %s", session_id, e)

        logger.info("Closed session %s", session_id)

    async def shutdown_all(self) -> None:
        """Close the shared browser, invalidating every session at once."""
        for state in self._sessions.values():
            for task in list(state.pending_loads):
                task.cancel()
        self._sessions.clear()
        self._creation_locks.clear()
        self._cursor_visibility.clear()
        await self._supervisor.shutdown()

    # =========================================================================
    # Cursor visibility
    # =========================================================================

    def set_cursor_visible(self, session_id: str, visible: bool) -> None:
        self._cursor_visibility[session_id] = visible

    def is_cursor_visible(self, session_id: str) -> bool:
        return self._cursor_visibility.get(session_id, self._settings.cursor_visible)


__all__ = ["TabEventKind", "TabEvent", "SessionState", "SessionRegistry"]
