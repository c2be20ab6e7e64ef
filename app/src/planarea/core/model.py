from __future__ import annotations

import math
from typing import NamedTuple, Optional, Sequence, Tuple


class ImagePoint(NamedTuple):
    """A point in the pixel space of the loaded bitmap (before rotation)."""

    x: float
    y: float


class CanvasPoint(NamedTuple):
    """A point in the pixel space of the visible canvas."""

    x: float
    y: float


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def point_in_radius(p: Tuple[float, float], q: Tuple[float, float], radius: float) -> bool:
    return distance(p, q) <= radius


def shoelace_area(points: Sequence[Tuple[float, float]]) -> float:
    """Return the signed area of a polygon using the shoelace formula.

    Fewer than 3 points describe no area, so 0.0 is returned for them.
    """
    if len(points) < 3:
        return 0.0
    area = 0.0
    n = len(points)
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def polygon_area(points: Sequence[Tuple[float, float]]) -> float:
    """Return the absolute polygon area in squared pixel units.

    Self-intersecting outlines are not rejected; their shoelace value is not
    the true enclosed area.
    """
    return abs(shoelace_area(points))


def polygon_perimeter(points: Sequence[Tuple[float, float]]) -> float:
    """Return the perimeter length of a polygon."""
    if len(points) < 2:
        return 0.0
    perim = 0.0
    n = len(points)
    for i in range(n):
        perim += distance(points[i], points[(i + 1) % n])
    return perim


def polygon_centroid(points: Sequence[Tuple[float, float]]) -> Optional[ImagePoint]:
    """Return polygon centroid; fall back to vertex average for near-zero area."""
    if not points:
        return None
    area_acc = 0.0
    cx_acc = 0.0
    cy_acc = 0.0
    n = len(points)
    for i in range(n):
        x0, y0 = points[i]
        x1, y1 = points[(i + 1) % n]
        cross = x0 * y1 - x1 * y0
        area_acc += cross
        cx_acc += (x0 + x1) * cross
        cy_acc += (y0 + y1) * cross
    area = area_acc / 2.0
    if abs(area) < 1e-9:
        avg_x = sum(p[0] for p in points) / n
        avg_y = sum(p[1] for p in points) / n
        return ImagePoint(avg_x, avg_y)
    return ImagePoint(cx_acc / (6.0 * area), cy_acc / (6.0 * area))


def snap_to_axis(p: ImagePoint, anchor: ImagePoint) -> ImagePoint:
    """Force the segment anchor->p to be horizontal or vertical.

    The axis with the larger absolute delta wins; ties go horizontal.
    """
    dx = p.x - anchor.x
    dy = p.y - anchor.y
    if abs(dx) >= abs(dy):
        return ImagePoint(p.x, anchor.y)
    return ImagePoint(anchor.x, p.y)
