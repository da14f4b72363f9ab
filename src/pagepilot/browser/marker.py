# Visual marker: numbered overlays for screenshot-based inference
# Changes: Palette colors in any CSS notation get a readable label color
#   (via Pillow). Colors are generated here rather than in the page
#   so a seeded random.Random gives repeatable colors.
"""Draws numbered, colored boxes over visible interactive elements."""

from __future__ import annotations

import logging
import random
import re
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import ImageColor

from pagepilot.browser import scripts
from pagepilot.browser.errors import BrowserLaunchError
from pagepilot.browser.models import ActionResult, Coordinates, MarkedElement, MarkResult
from pagepilot.browser.registry import SessionRegistry
from pagepilot.config import Settings, get_settings

logger = logging.getLogger(__name__)

_HSL_LIGHTNESS = re.compile(
    r"hsl\(\s*\d+(?:\.\d+)?\s*,\s*\d+(?:\.\d+)?%\s*,\s*(\d+(?:\.\d+)?)%\s*\)"
)


@dataclass
class MarkerOptions:
    """Options for one marking pass.

    ``max_elements`` falls back to the configured cap when left as None.
    """

    box_color: str = "red"
    text_color: str = "white"
    max_elements: int | None = None
    min_text_length: int = 0
    remove_existing: bool = True
    random_colors: bool = True
    palette: Sequence[str] | None = None


class MarkerColors:
    """Bold overlay colors with a readable label color for each."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def random_color(self) -> str:
        """High saturation (90-99%) and mid lightness (30-54%) HSL color."""
        hue = self._rng.randrange(360)
        saturation = 90 + self._rng.randrange(10)
        lightness = 30 + self._rng.randrange(25)
        return f"hsl({hue}, {saturation}%, {lightness}%)"

    @staticmethod
    def contrasting_text_color(color: str) -> str:
        """White on dark backgrounds, black on light ones.

        HSL colors are split at 50% lightness. Any other CSS color (hex,
        ``rgb()``, named) is judged by perceived brightness. Colors that
        cannot be parsed get white text.
        """
        match = _HSL_LIGHTNESS.search(color)
        if match:
            return "white" if float(match.group(1)) < 50 else "black"

        try:
            red, green, blue = ImageColor.getrgb(color.strip())[:3]
        except ValueError:
            return "white"
        brightness = (299 * red + 587 * green + 114 * blue) / 1000
        return "white" if brightness < 128 else "black"

    def pick(self, options: MarkerOptions, index: int) -> tuple[str, str]:
        """Return (box color, label text color) for the index-th marker."""
        if options.palette:
            color = options.palette[index % len(options.palette)]
            return color, self.contrasting_text_color(color)
        if options.random_colors:
            color = self.random_color()
            return color, self.contrasting_text_color(color)
        return options.box_color, options.text_color


class VisualMarker:
    """Numbered overlays on the active tab of a session."""

    def __init__(
        self,
        registry: SessionRegistry,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings or get_settings()
        self.colors = MarkerColors(rng)

    async def mark_visible_elements(
        self,
        session_id: str,
        options: MarkerOptions | None = None,
    ) -> MarkResult:
        """Mark every visible, uncovered interactive element with a number.

        Labels start at 1 and follow scan order, so ``result.elements`` can
        be used to click by label afterwards.
        """
        options = options or MarkerOptions()
        max_elements = options.max_elements or self._settings.max_marked_elements

        try:
            page = await self._registry.get_active_tab(session_id)
            if options.remove_existing:
                await page.evaluate(scripts.REMOVE_MARKERS_SCRIPT)

            found = await page.evaluate(
                scripts.MARKER_SCAN_SCRIPT,
                {"maxElements": max_elements, "minTextLength": options.min_text_length},
            )

            overlays: list[dict] = []
            marked: list[MarkedElement] = []
            for index, item in enumerate(found or []):
                label = index + 1
                color, text_color = self.colors.pick(options, index)
                overlays.append({
                    "label": label,
                    "color": color,
                    "textColor": text_color,
                    "rect": item["rect"],
                })
                marked.append(MarkedElement(
                    label_number=label,
                    coordinates=Coordinates.from_dict(item["coordinates"]),
                ))

            await page.evaluate(scripts.DRAW_MARKERS_SCRIPT, overlays)
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Marking elements failed for session %s: %s", session_id, e)
            return MarkResult(success=False, error=f"mark elements failed: {e}")

        logger.debug("Session %s: marked %d elements", session_id, len(marked))
        return MarkResult(success=True, marked_count=len(marked), elements=marked)

    async def remove_element_markers(self, session_id: str) -> ActionResult:
        """Strip every overlay and the label container."""
        try:
            page = await self._registry.get_active_tab(session_id)
            await page.evaluate(scripts.REMOVE_MARKERS_SCRIPT)
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.warning("Removing markers failed for session %s: %s", session_id, e)
            return ActionResult.fail("remove markers", e)
        return ActionResult.ok()


__all__ = ["MarkerOptions", "MarkerColors", "VisualMarker"]
