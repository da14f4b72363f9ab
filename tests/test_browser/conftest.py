# Shared fakes for browser engine tests
# Changes: Initial creation
#
# The fakes model only what the engine touches: event handlers ("page" on the
# context, "close" on the page) fire synchronously, like Playwright's.
"""Fixtures and in-memory stand-ins for Playwright objects."""

import random
from collections import defaultdict
from unittest.mock import AsyncMock, MagicMock

import pytest

from pagepilot.browser.engine import BrowserEngine
from pagepilot.browser.registry import SessionRegistry
from pagepilot.config import Settings


class FakePage:
    """A Page whose async methods are AsyncMocks and whose close() emits 'close'."""

    def __init__(self, context=None, url: str = "about:blank"):
        self.context = context
        self.url = url
        self.closed = False
        self._handlers = defaultdict(list)

        self.evaluate = AsyncMock(return_value=None)
        self.click = AsyncMock()
        self.goto = AsyncMock()
        self.reload = AsyncMock()
        self.go_back = AsyncMock()
        self.go_forward = AsyncMock()
        self.wait_for_load_state = AsyncMock()
        self.wait_for_function = AsyncMock()
        self.wait_for_timeout = AsyncMock()
        self.screenshot = AsyncMock(return_value=b"\xff\xd8jpeg")

        self.mouse = MagicMock()
        self.mouse.click = AsyncMock()
        self.keyboard = MagicMock()
        self.keyboard.type = AsyncMock()
        self.keyboard.press = AsyncMock()

        self.bounding_box = AsyncMock(return_value={"x": 10, "y": 20, "width": 100, "height": 40})
        self.locator = MagicMock()
        self.locator.return_value.first.bounding_box = self.bounding_box

    def on(self, event, handler):
        self._handlers[event].append(handler)

    def emit(self, event, *args):
        for handler in list(self._handlers[event]):
            handler(*args)

    def is_closed(self):
        return self.closed

    async def close(self):
        if self.closed:
            return
        self.closed = True
        self.emit("close", self)


class FakeContext:
    """A BrowserContext that announces every new page through 'page' handlers."""

    def __init__(self, **options):
        self.options = options
        self.pages = []
        self.closed = False
        self._handlers = defaultdict(list)

    def on(self, event, handler):
        self._handlers[event].append(handler)

    def _open(self, url: str = "about:blank") -> FakePage:
        page = FakePage(self, url)
        self.pages.append(page)
        for handler in list(self._handlers["page"]):
            handler(page)
        return page

    async def new_page(self):
        return self._open()

    def simulate_popup(self, url: str = "about:blank") -> FakePage:
        """What a target=_blank link click looks like from the context's side."""
        return self._open(url)

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.contexts = []
        self.closed = False

    async def new_context(self, **options):
        context = FakeContext(**options)
        self.contexts.append(context)
        return context

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(
        headless=True,
        min_screenshot_wait_ms=0,
        readiness_timeout_ms=100,
        new_tab_load_timeout_ms=100,
        cursor_visible=True,
    )


@pytest.fixture
def fake_browser():
    return FakeBrowser()


@pytest.fixture
def supervisor(fake_browser):
    mock = MagicMock()
    mock.ensure_browser = AsyncMock(return_value=fake_browser)
    mock.shutdown = AsyncMock()
    return mock


@pytest.fixture
def registry(supervisor, settings):
    return SessionRegistry(supervisor, settings)


@pytest.fixture
def engine(settings, fake_browser):
    eng = BrowserEngine(settings=settings, rng=random.Random(1234))
    eng.supervisor.ensure_browser = AsyncMock(return_value=fake_browser)
    return eng
