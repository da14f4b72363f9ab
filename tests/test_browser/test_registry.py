# Session/tab registry tests
# Changes: Initial creation covering the LIFO tab stack and event hooks
"""Tests for SessionRegistry."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.registry import TabEvent, TabEventKind


class TestGetActiveTab:
    """Tests for lazy creation of contexts and tabs."""

    async def test_first_access_creates_context_and_tab(self, registry, supervisor, fake_browser):
        """Should launch, create one context and one tab."""
        page = await registry.get_active_tab("s1")

        supervisor.ensure_browser.assert_awaited_once()
        assert len(fake_browser.contexts) == 1
        assert fake_browser.contexts[0].pages == [page]
        assert registry.tab_count("s1") == 1

    async def test_context_uses_configured_viewport(self, registry, fake_browser, settings):
        """Should size the context from settings."""
        await registry.get_active_tab("s1")

        assert fake_browser.contexts[0].options["viewport"] == {
            "width": settings.window_width,
            "height": settings.window_height,
        }

    async def test_second_access_returns_same_tab(self, registry, fake_browser):
        """Should not create anything on repeat calls."""
        first = await registry.get_active_tab("s1")
        second = await registry.get_active_tab("s1")

        assert first is second
        assert len(fake_browser.contexts) == 1
        assert registry.tab_count("s1") == 1

    async def test_sessions_get_isolated_contexts(self, registry, fake_browser):
        """Should give each session its own context and tab."""
        a = await registry.get_active_tab("a")
        b = await registry.get_active_tab("b")

        assert a is not b
        assert a.context is not b.context
        assert len(fake_browser.contexts) == 2

    async def test_concurrent_first_access_creates_one_context(self, registry, fake_browser):
        """Two racing first calls for one session must share a context."""
        pages = await asyncio.gather(
            registry.get_active_tab("s1"),
            registry.get_active_tab("s1"),
        )

        assert pages[0] is pages[1]
        assert len(fake_browser.contexts) == 1
        assert registry.tab_count("s1") == 1

    async def test_launch_failure_propagates(self, registry, supervisor):
        """A browser that cannot start is fatal to the session."""
        supervisor.ensure_browser.side_effect = BrowserLaunchError("no chromium")

        with pytest.raises(BrowserLaunchError):
            await registry.get_active_tab("s1")
        assert not registry.has_session("s1")

    async def test_new_tab_after_all_closed_reuses_context(self, registry, fake_browser):
        """If every tab closed, the next access opens a tab in the same context."""
        page = await registry.get_active_tab("s1")
        await page.close()
        assert registry.tab_count("s1") == 0

        replacement = await registry.get_active_tab("s1")

        assert replacement is not page
        assert len(fake_browser.contexts) == 1
        assert registry.tab_count("s1") == 1

    def test_unknown_session_has_no_tabs(self, registry):
        assert registry.tab_count("missing") == 0
        assert registry.active_tab("missing") is None


class TestTabEvents:
    """Tests for the event-driven tab stack."""

    async def test_popup_becomes_active(self, registry):
        """A tab opened by the page is pushed and becomes active."""
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup("https://example.com/next")

        assert registry.tab_count("s1") == 2
        assert await registry.get_active_tab("s1") is popup

    async def test_popup_waits_for_initial_load(self, registry):
        """Should start a bounded wait for the new tab's content."""
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup()
        await asyncio.sleep(0)

        popup.wait_for_load_state.assert_awaited_once_with("domcontentloaded", timeout=100)

    async def test_popup_load_timeout_is_ignored(self, registry):
        """A slow new tab still becomes active."""
        original = await registry.get_active_tab("s1")
        context = original.context

        popup = context.simulate_popup()
        popup.wait_for_load_state.side_effect = PlaywrightTimeoutError("slow")
        await asyncio.sleep(0)

        assert registry.active_tab("s1") is popup

    async def test_lifo_close_returns_to_previous_tabs(self, registry):
        """Opening N tabs then closing in reverse walks back to the original."""
        original = await registry.get_active_tab("s1")
        opened = [original.context.simulate_popup(f"https://example.com/{i}") for i in range(3)]

        for expected_previous in [opened[1], opened[0], original]:
            result = await registry.close_active_tab("s1")
            assert result.success
            assert registry.active_tab("s1") is expected_previous

        assert registry.tab_count("s1") == 1

    async def test_closing_middle_tab_preserves_order(self, registry):
        """A tab closed from outside is removed wherever it sits."""
        original = await registry.get_active_tab("s1")
        middle = original.context.simulate_popup()
        top = original.context.simulate_popup()

        await middle.close()

        assert registry.tabs("s1") == [original, top]
        assert registry.active_tab("s1") is top

    async def test_duplicate_open_event_is_ignored(self, registry):
        """Re-announcing a known tab must not push it twice."""
        page = await registry.get_active_tab("s1")

        registry.dispatch(TabEvent(TabEventKind.OPENED, "s1", page))

        assert registry.tab_count("s1") == 1

    async def test_events_for_unknown_session_are_ignored(self, registry):
        page = await registry.get_active_tab("s1")

        registry.dispatch(TabEvent(TabEventKind.CLOSED, "other", page))

        assert registry.tab_count("s1") == 1


class TestCloseActiveTab:
    """Tests for the last-tab invariant."""

    async def test_refuses_to_close_only_tab(self, registry):
        page = await registry.get_active_tab("s1")

        result = await registry.close_active_tab("s1")

        assert result.success is False
        assert "only one tab" in result.error
        assert "close tab" in result.error
        assert not page.closed
        assert registry.tab_count("s1") == 1

    async def test_refuses_for_unknown_session(self, registry):
        result = await registry.close_active_tab("nobody")

        assert result.success is False
        assert result.error == "close tab failed: no such session 'nobody'"

    async def test_reports_empty_stack(self, registry):
        page = await registry.get_active_tab("s1")
        await page.close()

        result = await registry.close_active_tab("s1")

        assert result.error == "close tab failed: session 's1' has no open tabs"

    async def test_reports_close_errors(self, registry):
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup()
        popup.close = AsyncMock(side_effect=RuntimeError("target crashed"))

        result = await registry.close_active_tab("s1")

        assert result.success is False
        assert "target crashed" in result.error
        assert registry.tab_count("s1") == 2

    async def test_pops_even_if_close_event_is_late(self, registry):
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup()
        popup.close = AsyncMock()

        result = await registry.close_active_tab("s1")

        assert result.data == {"tab_count": 1}
        assert registry.active_tab("s1") is original

    async def test_count_never_reaches_zero(self, registry):
        original = await registry.get_active_tab("s1")
        original.context.simulate_popup()

        for _ in range(5):
            await registry.close_active_tab("s1")
            assert registry.tab_count("s1") >= 1


class TestSessionLifecycle:
    """Tests for close_session and shutdown_all."""

    async def test_close_session_closes_tabs_and_context(self, registry):
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup()

        await registry.close_session("s1")

        assert original.closed and popup.closed
        assert original.context.closed
        assert not registry.has_session("s1")
        assert registry.tab_count("s1") == 0

    async def test_close_session_tolerates_tab_errors(self, registry):
        original = await registry.get_active_tab("s1")
        popup = original.context.simulate_popup()
        popup.close = AsyncMock(side_effect=RuntimeError("already gone"))

        await registry.close_session("s1")

        assert original.closed
        assert original.context.closed
        assert not registry.has_session("s1")

    async def test_close_unknown_session_is_noop(self, registry):
        await registry.close_session("never-opened")

    async def test_shutdown_all_clears_every_session(self, registry, supervisor):
        await registry.get_active_tab("a")
        await registry.get_active_tab("b")

        await registry.shutdown_all()

        supervisor.shutdown.assert_awaited_once()
        assert registry.session_ids() == []
        assert registry.tab_count("a") == 0


class TestCursorVisibilityFlag:
    def test_defaults_to_settings(self, registry):
        assert registry.is_cursor_visible("s1") is True

    def test_toggle(self, registry):
        registry.set_cursor_visible("s1", False)
        assert registry.is_cursor_visible("s1") is False
