# Descriptor types returned by the browser engine
# Changes: Initial creation with geometry, element, marker and result types
#
# Every in-page query returns plain JSON; these dataclasses give each query
# one stable shape so callers never deal with ad hoc dicts.
"""Typed descriptors for in-page query results and action outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Coordinates:
    """A point in viewport CSS pixels."""

    x: float
    y: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coordinates:
        return cls(x=data.get("x", 0), y=data.get("y", 0))

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class BoundingBox:
    """An element rectangle in viewport CSS pixels."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoundingBox:
        return cls(
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
        )

    @property
    def center(self) -> Coordinates:
        return Coordinates(
            x=round(self.x + self.width / 2),
            y=round(self.y + self.height / 2),
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class ElementSummary:
    """An element that is rendered, in the viewport and exposed at its center."""

    tag_name: str
    coordinates: Coordinates
    id: str | None = None
    class_name: str | None = None
    text: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElementSummary:
        return cls(
            tag_name=data.get("tagName", ""),
            coordinates=Coordinates.from_dict(data.get("coordinates", {})),
            id=data.get("id") or None,
            class_name=data.get("className") or None,
            text=data.get("text") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "tag_name": self.tag_name,
            "coordinates": self.coordinates.to_dict(),
        }
        # Only include identifiers that exist, keeps LLM prompts short
        if self.id:
            result["id"] = self.id
        if self.class_name:
            result["class_name"] = self.class_name
        if self.text:
            result["text"] = self.text
        return result


@dataclass
class InteractiveElement:
    """A clickable or input control with both visibility flags.

    ``in_viewport`` means the whole rectangle lies inside the visible
    scroll region. ``visually_exposed`` means the element (or one of its
    descendants) is the topmost node at its own center point.
    """

    type: str
    tag_name: str
    coordinates: Coordinates
    bounding_box: BoundingBox
    attributes: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    placeholder: str | None = None
    in_viewport: bool = False
    visually_exposed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InteractiveElement:
        return cls(
            type=data.get("type") or data.get("tagName", ""),
            tag_name=data.get("tagName", ""),
            coordinates=Coordinates.from_dict(data.get("coordinates", {})),
            bounding_box=BoundingBox.from_dict(data.get("boundingBox", {})),
            attributes=dict(data.get("attributes") or {}),
            text=data.get("text") or None,
            placeholder=data.get("placeholder") or None,
            in_viewport=bool(data.get("isVisibleInCurrentViewPort")),
            visually_exposed=bool(data.get("isVisuallyVisible")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "tag_name": self.tag_name,
            "text": self.text,
            "placeholder": self.placeholder,
            "coordinates": self.coordinates.to_dict(),
            "bounding_box": self.bounding_box.to_dict(),
            "attributes": dict(self.attributes),
            "in_viewport": self.in_viewport,
            "visually_exposed": self.visually_exposed,
        }


@dataclass
class PageElements:
    """Clickable and input controls from one scan, each in document order."""

    clickable: list[InteractiveElement] = field(default_factory=list)
    inputs: list[InteractiveElement] = field(default_factory=list)

    def combined(self) -> list[InteractiveElement]:
        return [*self.clickable, *self.inputs]

    def to_dict(self) -> dict[str, Any]:
        return {
            "clickable": [el.to_dict() for el in self.clickable],
            "inputs": [el.to_dict() for el in self.inputs],
        }


@dataclass
class ElementDetails:
    """The interactive node found by hit testing a point."""

    tag_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    id: str | None = None
    class_name: str | None = None
    text: str | None = None
    href: str | None = None
    type: str | None = None
    value: str | None = None
    placeholder: str | None = None
    role: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElementDetails:
        return cls(
            tag_name=data.get("tagName", ""),
            attributes=dict(data.get("attributes") or {}),
            id=data.get("id") or None,
            class_name=data.get("className") or None,
            text=data.get("textContent") or None,
            href=data.get("href") or None,
            type=data.get("type") or None,
            value=data.get("value") or None,
            placeholder=data.get("placeholder") or None,
            role=data.get("role") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag_name": self.tag_name,
            "id": self.id,
            "class_name": self.class_name,
            "text": self.text,
            "href": self.href,
            "type": self.type,
            "value": self.value,
            "placeholder": self.placeholder,
            "role": self.role,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class MarkedElement:
    """One numbered overlay and the center of the element under it."""

    label_number: int
    coordinates: Coordinates

    def to_dict(self) -> dict[str, Any]:
        return {"label_number": self.label_number, "coordinates": self.coordinates.to_dict()}


@dataclass
class MarkResult:
    """Outcome of a marking pass."""

    success: bool
    marked_count: int = 0
    elements: list[MarkedElement] = field(default_factory=list)
    error: str | None = None

    def coordinates_for(self, label_number: int) -> Coordinates | None:
        """Look up the click target behind a label."""
        for element in self.elements:
            if element.label_number == label_number:
                return element.coordinates
        return None

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "marked_count": self.marked_count,
            "elements": [el.to_dict() for el in self.elements],
        }


@dataclass
class ActionResult:
    """Discriminated result of every session-scoped primitive."""

    success: bool
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **data: Any) -> ActionResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, operation: str, cause: BaseException | str) -> ActionResult:
        """Build a failure whose message names the operation and the cause."""
        message = str(cause) or type(cause).__name__
        return cls(success=False, error=f"{operation} failed: {message}")

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, **self.data}


@dataclass
class PageInference:
    """A frame plus the controls and scroll state it was taken with."""

    image: str
    elements: list[InteractiveElement]
    scroll_position: float = 0
    total_scroll: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "image": self.image,
            "elements": [el.to_dict() for el in self.elements],
            "scroll_position": self.scroll_position,
            "total_scroll": self.total_scroll,
        }


@dataclass
class MarkedScreenshot:
    """A frame taken while numbered overlays were on screen."""

    image: str | None
    elements: list[MarkedElement] = field(default_factory=list)


__all__ = [
    "Coordinates",
    "BoundingBox",
    "ElementSummary",
    "InteractiveElement",
    "PageElements",
    "ElementDetails",
    "MarkedElement",
    "MarkResult",
    "ActionResult",
    "PageInference",
    "MarkedScreenshot",
]
