"""
Scene graph of drawing primitives.

The renderer produces a SceneGraph: an ordered tuple of primitives plus the
canvas size. Primitives are plain frozen values with no markup syntax; a
serializer (see svg.py) turns them into a concrete format. Paint order is
tuple order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from .projection import Point, bounds, isometric_point, project_points
from .text_fit import estimate_text_width


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: str | None = None
    stroke_width: float = 1.0
    rx: float = 0.0
    role: str = ""
    title: str | None = None


@dataclass(frozen=True)
class Polygon:
    points: tuple[Point, ...]
    fill: str
    stroke: str | None = None
    stroke_width: float = 1.0
    role: str = ""
    title: str | None = None


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str
    stroke: str | None = None
    stroke_width: float = 0.5
    role: str = ""
    title: str | None = None


@dataclass(frozen=True)
class Text:
    """
    A single line of text.

    Attributes:
        x, y: Anchor point; y is the baseline
        content: Text to draw
        font_size: Font size in px
        fill: Text colour
        anchor: "start", "middle" or "end"
        font_weight: "normal" or "bold"
        role: Semantic tag (e.g. "device-label")
        title: Tooltip text
    """
    x: float
    y: float
    content: str
    font_size: float
    fill: str
    anchor: str = "start"
    font_weight: str = "normal"
    role: str = ""
    title: str | None = None


@dataclass(frozen=True)
class ImageRef:
    """An external image placed in a box (device images in image label mode)."""
    x: float
    y: float
    width: float
    height: float
    href: str
    role: str = ""
    title: str | None = None


Primitive = Union[RectShape, Polygon, Circle, Text, ImageRef]


@dataclass(frozen=True)
class SceneGraph:
    """
    A complete drawing.

    Attributes:
        width, height: Canvas size in px
        background: Canvas fill colour
        primitives: Primitives in paint order
    """
    width: float
    height: float
    background: str
    primitives: tuple[Primitive, ...]

    def by_role(self, role: str) -> list[Primitive]:
        """All primitives tagged with a role, in paint order."""
        return [p for p in self.primitives if p.role == role]


# =============================================================================
# GEOMETRY HELPERS
# =============================================================================

def primitive_points(p: Primitive) -> list[Point]:
    """Points spanning a primitive's extent (text width is estimated)."""
    if isinstance(p, (RectShape, ImageRef)):
        return [(p.x, p.y), (p.x + p.width, p.y + p.height)]
    if isinstance(p, Polygon):
        return list(p.points)
    if isinstance(p, Circle):
        return [(p.cx - p.r, p.cy - p.r), (p.cx + p.r, p.cy + p.r)]
    if isinstance(p, Text):
        width = estimate_text_width(p.content, p.font_size)
        if p.anchor == "middle":
            left = p.x - width / 2
        elif p.anchor == "end":
            left = p.x - width
        else:
            left = p.x
        return [(left, p.y - p.font_size), (left + width, p.y + p.font_size * 0.25)]
    raise TypeError(f"Unknown primitive: {type(p).__name__}")


def content_bounds(
    primitives: list[Primitive] | tuple[Primitive, ...],
) -> tuple[float, float, float, float] | None:
    """Union bounds (min_x, min_y, max_x, max_y) of primitives, or None if empty."""
    return bounds(pt for p in primitives for pt in primitive_points(p))


def translate(p: Primitive, dx: float, dy: float) -> Primitive:
    """Return a primitive moved by (dx, dy)."""
    if isinstance(p, (RectShape, Text, ImageRef)):
        return replace(p, x=p.x + dx, y=p.y + dy)
    if isinstance(p, Polygon):
        return replace(p, points=tuple((x + dx, y + dy) for x, y in p.points))
    if isinstance(p, Circle):
        return replace(p, cx=p.cx + dx, cy=p.cy + dy)
    raise TypeError(f"Unknown primitive: {type(p).__name__}")


def project_isometric(p: Primitive) -> Primitive:
    """
    Project a flat primitive into isometric space.

    Rectangles become 4-point polygons. Circles, text and images keep their
    shape and move with their anchor point.
    """
    if isinstance(p, RectShape):
        corners = [
            (p.x, p.y),
            (p.x + p.width, p.y),
            (p.x + p.width, p.y + p.height),
            (p.x, p.y + p.height),
        ]
        return Polygon(
            points=tuple(project_points(corners)),
            fill=p.fill,
            stroke=p.stroke,
            stroke_width=p.stroke_width,
            role=p.role,
            title=p.title,
        )
    if isinstance(p, Polygon):
        return replace(p, points=tuple(project_points(p.points)))
    if isinstance(p, Circle):
        cx, cy = isometric_point(p.cx, p.cy)
        return replace(p, cx=cx, cy=cy)
    if isinstance(p, (Text, ImageRef)):
        x, y = isometric_point(p.x, p.y)
        return replace(p, x=x, y=y)
    raise TypeError(f"Unknown primitive: {type(p).__name__}")
