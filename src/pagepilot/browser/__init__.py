# Browser engine module for PagePilot
# Changes: Exports for supervisor, registry, inspector, marker, cursor,
#   interactions, navigation, screenshots and the engine facade
#
# This module drives one shared Chromium process through Playwright and
# tracks a LIFO tab stack per session.
"""Browser session and interaction engine."""

from .cursor import CursorSimulator
from .engine import BrowserEngine, get_browser_engine
from .errors import BrowserLaunchError, PagePilotError
from .inspector import ElementInspector
from .interactions import InteractionPrimitives
from .marker import MarkerColors, MarkerOptions, VisualMarker
from .models import (
    ActionResult,
    BoundingBox,
    Coordinates,
    ElementDetails,
    ElementSummary,
    InteractiveElement,
    MarkedElement,
    MarkedScreenshot,
    MarkResult,
    PageElements,
    PageInference,
)
from .navigation import Navigator
from .registry import SessionRegistry, SessionState, TabEvent, TabEventKind
from .screenshot import ScreenshotService
from .supervisor import BrowserSupervisor

__all__ = [
    # Engine
    "BrowserEngine",
    "get_browser_engine",
    "BrowserSupervisor",
    "SessionRegistry",
    "SessionState",
    "TabEvent",
    "TabEventKind",
    # Services
    "ElementInspector",
    "VisualMarker",
    "MarkerColors",
    "MarkerOptions",
    "CursorSimulator",
    "InteractionPrimitives",
    "Navigator",
    "ScreenshotService",
    # Descriptors
    "ActionResult",
    "BoundingBox",
    "Coordinates",
    "ElementDetails",
    "ElementSummary",
    "InteractiveElement",
    "MarkedElement",
    "MarkedScreenshot",
    "MarkResult",
    "PageElements",
    "PageInference",
    # Errors
    "PagePilotError",
    "BrowserLaunchError",
]
