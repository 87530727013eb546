"""
SVG serialization of scene graphs.

Coordinates are rounded to two decimals here and only here; the scene graph
itself keeps unrounded values.
"""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path

from .constants import FONT_FAMILY
from .scene import Circle, ImageRef, Polygon, Primitive, RectShape, SceneGraph, Text

logger = logging.getLogger(__name__)


def fmt(value: float) -> str:
    """Format a coordinate with at most two decimals and no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _attr(value: str) -> str:
    return escape(value, quote=True)


def _title(title: str | None) -> str:
    if not title:
        return ""
    return f"<title>{escape(title, quote=False)}</title>"


def _role(role: str) -> str:
    return f' class="{_attr(role)}"' if role else ""


def _stroke(stroke: str | None, stroke_width: float) -> str:
    if not stroke:
        return ""
    return f' stroke="{_attr(stroke)}" stroke-width="{fmt(stroke_width)}"'


def _element(tag: str, attrs: str, title: str | None) -> str:
    # Tooltips are child <title> elements
    inner = _title(title)
    if inner:
        return f"<{tag}{attrs}>{inner}</{tag}>"
    return f"<{tag}{attrs}/>"


def primitive_to_svg(p: Primitive) -> str:
    """Serialize one primitive to an SVG element."""
    if isinstance(p, RectShape):
        attrs = (
            f' x="{fmt(p.x)}" y="{fmt(p.y)}" width="{fmt(p.width)}" height="{fmt(p.height)}"'
            + (f' rx="{fmt(p.rx)}"' if p.rx else "")
            + f' fill="{_attr(p.fill)}"'
            + _stroke(p.stroke, p.stroke_width)
            + _role(p.role)
        )
        return _element("rect", attrs, p.title)

    if isinstance(p, Polygon):
        points = " ".join(f"{fmt(x)},{fmt(y)}" for x, y in p.points)
        attrs = (
            f' points="{points}" fill="{_attr(p.fill)}"'
            + _stroke(p.stroke, p.stroke_width)
            + _role(p.role)
        )
        return _element("polygon", attrs, p.title)

    if isinstance(p, Circle):
        attrs = (
            f' cx="{fmt(p.cx)}" cy="{fmt(p.cy)}" r="{fmt(p.r)}" fill="{_attr(p.fill)}"'
            + _stroke(p.stroke, p.stroke_width)
            + _role(p.role)
        )
        return _element("circle", attrs, p.title)

    if isinstance(p, Text):
        weight = f' font-weight="{p.font_weight}"' if p.font_weight != "normal" else ""
        return (
            f'<text x="{fmt(p.x)}" y="{fmt(p.y)}" '
            f'text-anchor="{p.anchor}" '
            f'font-size="{fmt(p.font_size)}"{weight} '
            f'fill="{_attr(p.fill)}"{_role(p.role)}>'
            f"{_title(p.title)}{escape(p.content, quote=False)}</text>"
        )

    if isinstance(p, ImageRef):
        attrs = (
            f' x="{fmt(p.x)}" y="{fmt(p.y)}" width="{fmt(p.width)}" height="{fmt(p.height)}"'
            f' href="{_attr(p.href)}" preserveAspectRatio="xMidYMid meet"'
            + _role(p.role)
        )
        return _element("image", attrs, p.title)

    raise TypeError(f"Unknown primitive: {type(p).__name__}")


def to_svg(scene: SceneGraph) -> str:
    """
    Serialize a scene graph to a standalone SVG document.

    Args:
        scene: Scene to serialize

    Returns:
        SVG document as a string
    """
    width, height = fmt(scene.width), fmt(scene.height)
    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" '
        f'font-family="{_attr(FONT_FAMILY)}">',
        f'<rect x="0" y="0" width="{width}" height="{height}" '
        f'fill="{_attr(scene.background)}" class="background"/>',
    ]
    svg_parts.extend(primitive_to_svg(p) for p in scene.primitives)
    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


def write_svg(scene: SceneGraph, path: str | Path) -> Path:
    """
    Write a scene graph to an SVG file.

    Returns:
        The path written
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_svg(scene))
    logger.debug("Wrote %s (%d primitives)", path, len(scene.primitives))
    return path
