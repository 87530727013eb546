"""
Isometric projection for rack elevations.

The flat elevation (x to the right, y down, SVG convention) is mapped onto a
30 degree isometric plane:

    x' = (x - y) * cos(30)
    y' = (x + y) * sin(30)

Depth (front to rear) is not a third input axis. Receding faces are drawn in
flat space, offset up and to the right by the depth, and then projected with
the same transform as everything else.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from .constants import COS_30, SIN_30

Point = tuple[float, float]


def isometric_matrix() -> np.ndarray:
    """
    Return the 2x2 isometric transform.

    Columns are the images of the flat x and y unit vectors:
    - x (right) goes to lower-right at 30 degrees below horizontal
    - y (down) goes to lower-left at 30 degrees below horizontal
    """
    return np.array([
        [COS_30, -COS_30],
        [SIN_30, SIN_30],
    ])


def isometric_point(x: float, y: float) -> Point:
    """
    Project one flat point.

    Args:
        x, y: Flat layout coordinates

    Returns:
        (x', y') isometric coordinates
    """
    return ((x - y) * COS_30, (x + y) * SIN_30)


def project_points(points: Iterable[Point]) -> list[Point]:
    """
    Project many flat points at once.

    Returns:
        Projected points as plain float tuples, in input order
    """
    arr = np.asarray(list(points), dtype=float)
    if arr.size == 0:
        return []

    projected = arr @ isometric_matrix().T
    return [(float(px), float(py)) for px, py in projected]


def depth_offset(depth_px: float) -> float:
    """
    Vertical rise of a receding edge of the given depth.

    A side panel of depth d is drawn from x to x + d while its edge rises
    by d * tan(30) so that it reads as going back into the page.
    """
    return depth_px * SIN_30 / COS_30


def side_face(x: float, y: float, height: float, depth_px: float) -> list[Point]:
    """Flat-space outline of a right-hand side panel starting at the edge x."""
    rise = depth_offset(depth_px)
    return [
        (x, y),
        (x + depth_px, y - rise),
        (x + depth_px, y + height - rise),
        (x, y + height),
    ]


def top_face(x: float, y: float, width: float, depth_px: float) -> list[Point]:
    """Flat-space outline of a top surface over the edge from x to x + width."""
    rise = depth_offset(depth_px)
    return [
        (x, y),
        (x + depth_px, y - rise),
        (x + width + depth_px, y - rise),
        (x + width, y),
    ]


def bounds(points: Iterable[Point]) -> tuple[float, float, float, float] | None:
    """Bounding box (min_x, min_y, max_x, max_y) of a point set, or None if empty."""
    pts = list(points)
    if not pts:
        return None

    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    return (min(xs), min(ys), max(xs), max(ys))
