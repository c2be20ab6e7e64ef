"""
Composed canvas <-> image mapping for the plan viewer.

The plan is fitted into the canvas (``fit_scale``), multiplied by the user
zoom, centred, shifted by the user pan and finally turned in 90 degree steps
about the centre of the image.  Editor data (calibration points, polygon
vertices) is always kept in the unrotated pixel space of the bitmap, so a
``ViewTransform`` is rebuilt from the ``ViewportState`` every frame and is the
only way to move a point from one space to the other.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ...core.model import CanvasPoint, ImagePoint


@dataclass
class ViewportState:
    zoom: float = 1.0
    pan: CanvasPoint = field(default_factory=lambda: CanvasPoint(0.0, 0.0))
    rotation_steps: int = 0

    def reset(self) -> None:
        self.zoom = 1.0
        self.pan = CanvasPoint(0.0, 0.0)
        self.rotation_steps = 0


@dataclass(frozen=True)
class ViewGeometry:
    """Canvas size plus the unrotated size of the bitmap being shown."""

    canvas_width: float
    canvas_height: float
    image_width: float = 0.0
    image_height: float = 0.0

    @property
    def has_image(self) -> bool:
        return self.image_width > 0 and self.image_height > 0


def effective_image_dims(width: float, height: float, rotation_steps: int) -> Tuple[float, float]:
    """Return image dims as seen on screen; odd quarter turns swap them."""
    if rotation_steps % 2 == 0:
        return width, height
    return height, width


def fit_scale(canvas_width: float, canvas_height: float, image_width: float, image_height: float) -> float:
    if image_width <= 0 or image_height <= 0 or canvas_width <= 0 or canvas_height <= 0:
        return 1.0
    return min(canvas_width / image_width, canvas_height / image_height)


def base_origin(canvas_width: float, canvas_height: float, image_width: float, image_height: float,
                scale: float, pan: CanvasPoint) -> CanvasPoint:
    ox = (canvas_width - image_width * scale) / 2 + pan.x
    oy = (canvas_height - image_height * scale) / 2 + pan.y
    return CanvasPoint(ox, oy)


def _quarter_turn(x: float, y: float, steps: int) -> Tuple[float, float]:
    # Exact rotation by steps*90 degrees, clockwise on a y-down canvas.
    steps %= 4
    if steps == 0:
        return x, y
    if steps == 1:
        return -y, x
    if steps == 2:
        return -x, -y
    return y, -x


@dataclass(frozen=True)
class ViewTransform:
    scale: float
    origin: CanvasPoint
    rotation_steps: int
    image_width: float
    image_height: float

    @property
    def view_dims(self) -> Tuple[float, float]:
        return effective_image_dims(self.image_width, self.image_height, self.rotation_steps)

    def to_canvas(self, p: ImagePoint) -> CanvasPoint:
        iw, ih = self.view_dims
        rx, ry = _quarter_turn(p.x - self.image_width / 2, p.y - self.image_height / 2, self.rotation_steps)
        return CanvasPoint(self.origin.x + (rx + iw / 2) * self.scale,
                           self.origin.y + (ry + ih / 2) * self.scale)

    def to_image(self, c: CanvasPoint) -> ImagePoint:
        iw, ih = self.view_dims
        qx = (c.x - self.origin.x) / self.scale - iw / 2
        qy = (c.y - self.origin.y) / self.scale - ih / 2
        dx, dy = _quarter_turn(qx, qy, -self.rotation_steps)
        return ImagePoint(dx + self.image_width / 2, dy + self.image_height / 2)

    def to_image_length(self, canvas_length: float) -> float:
        """Convert a screen-space length (hit radius, line width) to image units."""
        return canvas_length / self.scale


def compose(viewport: ViewportState, geometry: ViewGeometry) -> ViewTransform:
    """Build the transform for the current viewport state."""
    image_w = geometry.image_width if geometry.has_image else 1.0
    image_h = geometry.image_height if geometry.has_image else 1.0
    iw, ih = effective_image_dims(image_w, image_h, viewport.rotation_steps)
    base = fit_scale(geometry.canvas_width, geometry.canvas_height, iw, ih) if geometry.has_image else 1.0
    scale = base * viewport.zoom
    origin = base_origin(geometry.canvas_width, geometry.canvas_height, iw, ih, scale, viewport.pan)
    return ViewTransform(scale, origin, viewport.rotation_steps % 4, image_w, image_h)


def canvas_to_image(viewport: ViewportState, geometry: ViewGeometry, c: CanvasPoint) -> ImagePoint:
    return compose(viewport, geometry).to_image(c)


def image_to_canvas(viewport: ViewportState, geometry: ViewGeometry, p: ImagePoint) -> CanvasPoint:
    return compose(viewport, geometry).to_canvas(p)
