from __future__ import annotations

import math
from typing import Tuple

from ...core.model import CanvasPoint, clamp
from .pan import pan_by
from .viewport import ViewGeometry, ViewportState, compose

ZOOM_MIN = 0.2
ZOOM_MAX = 8.0
ZOOM_STEP = 1.2
WHEEL_ZOOM_SENSITIVITY = 0.0015


def zoom_at(viewport: ViewportState, geometry: ViewGeometry, cursor: CanvasPoint, factor: float,
            bounds: Tuple[float, float] = (ZOOM_MIN, ZOOM_MAX)) -> None:
    """Zoom by ``factor`` keeping the image point under ``cursor`` in place."""
    before = compose(viewport, geometry).to_image(cursor)
    viewport.zoom = clamp(viewport.zoom * factor, bounds[0], bounds[1])
    # Project with the new scale but the old pan, then shift pan by the miss.
    after = compose(viewport, geometry).to_canvas(before)
    pan_by(viewport, cursor.x - after.x, cursor.y - after.y)


def _canvas_centre(geometry: ViewGeometry) -> CanvasPoint:
    return CanvasPoint(geometry.canvas_width / 2, geometry.canvas_height / 2)


def zoom_in(viewport: ViewportState, geometry: ViewGeometry, step: float = ZOOM_STEP,
            bounds: Tuple[float, float] = (ZOOM_MIN, ZOOM_MAX)) -> None:
    zoom_at(viewport, geometry, _canvas_centre(geometry), step, bounds)


def zoom_out(viewport: ViewportState, geometry: ViewGeometry, step: float = ZOOM_STEP,
             bounds: Tuple[float, float] = (ZOOM_MIN, ZOOM_MAX)) -> None:
    zoom_at(viewport, geometry, _canvas_centre(geometry), 1.0 / step, bounds)


def wheel_zoom_factor(delta_y: float, sensitivity: float = WHEEL_ZOOM_SENSITIVITY) -> float:
    # Exponential response: equal wheel ticks give equal zoom ratios.
    return math.exp(-delta_y * sensitivity)


def on_wheel(viewport: ViewportState, geometry: ViewGeometry, cursor: CanvasPoint,
             delta_x: float, delta_y: float, zoom_modifier: bool,
             sensitivity: float = WHEEL_ZOOM_SENSITIVITY,
             bounds: Tuple[float, float] = (ZOOM_MIN, ZOOM_MAX)) -> None:
    """Modifier + wheel zooms about the cursor; a plain wheel scrolls the view."""
    if zoom_modifier:
        zoom_at(viewport, geometry, cursor, wheel_zoom_factor(delta_y, sensitivity), bounds)
    else:
        pan_by(viewport, -delta_x, -delta_y)
