# Visual marker tests
# Changes: Initial creation
"""Tests for VisualMarker and MarkerColors."""

import random
import re

import pytest

from pagepilot.browser import scripts
from pagepilot.browser.marker import MarkerColors, MarkerOptions, VisualMarker
from pagepilot.browser.models import Coordinates

HSL = re.compile(r"^hsl\((\d+), (\d+)%, (\d+)%\)$")


def _scan_item(x, y):
    return {
        "coordinates": {"x": x, "y": y},
        "rect": {"left": x - 5, "top": y - 5, "right": x + 5, "width": 10, "height": 10},
    }


def _evaluate_router(scan_results):
    """Answer the marker scan with scan_results and the draw call with its length."""

    async def evaluate(script, arg=None):
        if script == scripts.MARKER_SCAN_SCRIPT:
            return scan_results
        if script == scripts.DRAW_MARKERS_SCRIPT:
            return len(arg)
        return None

    return evaluate


@pytest.fixture
def marker(registry, settings):
    return VisualMarker(registry, settings, random.Random(7))


@pytest.fixture
async def page(registry):
    return await registry.get_active_tab("s1")


class TestMarkerColors:
    def test_random_color_ranges(self):
        colors = MarkerColors(random.Random(0))

        for _ in range(200):
            hue, saturation, lightness = map(int, HSL.match(colors.random_color()).groups())
            assert 0 <= hue < 360
            assert 90 <= saturation <= 99
            assert 30 <= lightness <= 54

    def test_seeded_colors_repeat(self):
        first, second = MarkerColors(random.Random(42)), MarkerColors(random.Random(42))
        assert [first.random_color() for _ in range(5)] == [second.random_color() for _ in range(5)]

    @pytest.mark.parametrize(
        "color,expected",
        [
            ("hsl(10, 95%, 30%)", "white"),
            ("hsl(200, 90%, 49%)", "white"),
            ("hsl(200, 90%, 50%)", "black"),
            ("hsl(60, 99%, 54%)", "black"),
            ("red", "white"),
            ("yellow", "black"),
            ("#ffff66", "black"),
            ("navy", "white"),
            ("#222", "white"),
            ("rgb(250, 250, 250)", "black"),
            ("not-a-color", "white"),
        ],
    )
    def test_contrasting_text_color(self, color, expected):
        assert MarkerColors.contrasting_text_color(color) == expected

    def test_palette_cycles(self):
        colors = MarkerColors(random.Random(0))
        options = MarkerOptions(palette=["hsl(0, 90%, 30%)", "hsl(120, 90%, 52%)"])

        picks = [colors.pick(options, i) for i in range(3)]

        assert picks == [
            ("hsl(0, 90%, 30%)", "white"),
            ("hsl(120, 90%, 52%)", "black"),
            ("hsl(0, 90%, 30%)", "white"),
        ]

    def test_light_palette_colors_get_dark_labels(self):
        colors = MarkerColors(random.Random(0))
        options = MarkerOptions(palette=["yellow", "#ffff66", "darkblue"])

        picks = [colors.pick(options, i) for i in range(3)]

        assert picks == [("yellow", "black"), ("#ffff66", "black"), ("darkblue", "white")]

    def test_fixed_colors_when_random_disabled(self):
        colors = MarkerColors(random.Random(0))
        options = MarkerOptions(box_color="blue", text_color="yellow", random_colors=False)

        assert colors.pick(options, 5) == ("blue", "yellow")


class TestMarkVisibleElements:
    async def test_labels_are_sequential_from_one(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([_scan_item(10, 10), _scan_item(50, 80), _scan_item(90, 30)])

        result = await marker.mark_visible_elements("s1")

        assert result.success
        assert result.marked_count == 3
        assert [el.label_number for el in result.elements] == [1, 2, 3]
        assert result.coordinates_for(2) == Coordinates(50, 80)

    async def test_removes_existing_before_scanning(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([])

        await marker.mark_visible_elements("s1")

        scripts_run = [call.args[0] for call in page.evaluate.await_args_list]
        assert scripts_run == [
            scripts.REMOVE_MARKERS_SCRIPT,
            scripts.MARKER_SCAN_SCRIPT,
            scripts.DRAW_MARKERS_SCRIPT,
        ]

    async def test_keeps_existing_when_asked(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([])

        await marker.mark_visible_elements("s1", MarkerOptions(remove_existing=False))

        scripts_run = [call.args[0] for call in page.evaluate.await_args_list]
        assert scripts.REMOVE_MARKERS_SCRIPT not in scripts_run

    async def test_scan_receives_limits(self, marker, page, settings):
        page.evaluate.side_effect = _evaluate_router([])

        await marker.mark_visible_elements("s1", MarkerOptions(min_text_length=3))

        scan_call = page.evaluate.await_args_list[1]
        assert scan_call.args[1] == {
            "maxElements": settings.max_marked_elements,
            "minTextLength": 3,
        }

    async def test_explicit_cap_overrides_setting(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([])

        await marker.mark_visible_elements("s1", MarkerOptions(max_elements=5))

        assert page.evaluate.await_args_list[1].args[1]["maxElements"] == 5

    async def test_draw_payload_carries_colors(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([_scan_item(10, 10), _scan_item(40, 40)])

        await marker.mark_visible_elements("s1")

        overlays = page.evaluate.await_args_list[-1].args[1]
        assert [o["label"] for o in overlays] == [1, 2]
        for overlay in overlays:
            assert HSL.match(overlay["color"])
            assert overlay["textColor"] == MarkerColors.contrasting_text_color(overlay["color"])
            assert set(overlay["rect"]) == {"left", "top", "right", "width", "height"}

    async def test_same_seed_gives_same_colors(self, registry, settings, page):
        page.evaluate.side_effect = _evaluate_router([_scan_item(10, 10), _scan_item(40, 40)])

        first = VisualMarker(registry, settings, random.Random(99))
        await first.mark_visible_elements("s1")
        first_colors = [o["color"] for o in page.evaluate.await_args_list[-1].args[1]]

        second = VisualMarker(registry, settings, random.Random(99))
        await second.mark_visible_elements("s1")
        second_colors = [o["color"] for o in page.evaluate.await_args_list[-1].args[1]]

        assert first_colors == second_colors

    async def test_remarking_does_not_accumulate(self, marker, page):
        page.evaluate.side_effect = _evaluate_router([_scan_item(10, 10), _scan_item(40, 40)])

        first = await marker.mark_visible_elements("s1")
        second = await marker.mark_visible_elements("s1")

        assert first.marked_count == second.marked_count == 2

    async def test_failure_is_reported(self, marker, page):
        page.evaluate.side_effect = RuntimeError("page crashed")

        result = await marker.mark_visible_elements("s1")

        assert result.success is False
        assert result.error == "mark elements failed: page crashed"
        assert result.elements == []


class TestRemoveElementMarkers:
    async def test_runs_cleanup(self, marker, page):
        result = await marker.remove_element_markers("s1")

        assert result.success
        page.evaluate.assert_awaited_once_with(scripts.REMOVE_MARKERS_SCRIPT)

    async def test_cleanup_failure(self, marker, page):
        page.evaluate.side_effect = RuntimeError("gone")

        result = await marker.remove_element_markers("s1")

        assert result.error == "remove markers failed: gone"
