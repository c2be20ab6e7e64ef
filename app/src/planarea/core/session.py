"""
Interaction loop for the calibrator.

``MeasureSession`` owns the authoritative editing state (viewport,
calibration line, traced polygon) and the transient drag/pan sessions.  The
GUI forwards raw pointer, wheel and key events to it in canvas coordinates;
every derived value (scale ratio, area) is recomputed on demand from that
state.  Mutations mark the session dirty and notify subscribers so the host
can schedule a single redraw.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..config import default_config
from ..features.editing.drag import DragSession, begin_drag, cancel_drag, end_drag, update_drag
from ..features.editing.draw import PolygonEditor
from ..features.navigation.pan import PanSession, on_pan_move, on_pan_start
from ..features.navigation.rotate import rotate_left, rotate_right
from ..features.navigation.viewport import ViewGeometry, ViewportState, ViewTransform, compose
from ..features.navigation.zoom import on_wheel, zoom_in, zoom_out
from ..features.results.results import ResultsLog, SavedResult, result_name
from ..features.scale.calibration import CalibrationLine
from .area import AreaResult, compute_area
from .model import CanvasPoint, ImagePoint

logger = logging.getLogger(__name__)

MODE_SCALE = 'scale'
MODE_POLYGON = 'polygon'
MODES = (MODE_SCALE, MODE_POLYGON)

# Tk button numbers
BUTTON_LEFT = 1
BUTTON_RIGHT = 3


class MeasureSession:
    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = config if config is not None else default_config()
        self.canvas_width: float = float(self.config['canvas_width'])
        self.canvas_height: float = float(self.config['canvas_height'])
        # Bitmap currently shown (None when nothing is loaded)
        self.image_width: int = 0
        self.image_height: int = 0
        self.image_name: Optional[str] = None
        self.page_number: int = 1
        self.page_count: int = 0
        # Authoritative editor state
        self.viewport = ViewportState()
        self.calibration = CalibrationLine()
        self.polygon = PolygonEditor()
        self.manual_area: str = ""
        self.mode: str = MODE_SCALE
        self.results = ResultsLog(duplicate_window_s=float(self.config['duplicate_window_s']))
        # Transient interaction state
        self.space_down: bool = False
        self._drag: Optional[DragSession] = None
        self._pan: Optional[PanSession] = None
        self._listeners: List[Callable[["MeasureSession"], None]] = []
        self.dirty: bool = True

    # ----- Change notification -----
    def subscribe(self, callback: Callable[["MeasureSession"], None]) -> None:
        self._listeners.append(callback)

    def mark_clean(self) -> None:
        self.dirty = False

    def _changed(self) -> None:
        self.dirty = True
        for callback in list(self._listeners):
            callback(self)

    # ----- Geometry -----
    @property
    def has_image(self) -> bool:
        return self.image_width > 0 and self.image_height > 0

    @property
    def geometry(self) -> ViewGeometry:
        return ViewGeometry(self.canvas_width, self.canvas_height, self.image_width, self.image_height)

    def transform(self) -> ViewTransform:
        return compose(self.viewport, self.geometry)

    def set_canvas_size(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        if (width, height) == (self.canvas_width, self.canvas_height):
            return
        self.canvas_width = float(width)
        self.canvas_height = float(height)
        self._changed()

    @property
    def _zoom_bounds(self):
        return float(self.config['zoom_min']), float(self.config['zoom_max'])

    # ----- Lifecycle -----
    def load_image(self, width: int, height: int, name: Optional[str] = None,
                   page_number: int = 1, page_count: int = 0) -> None:
        """Start over on a new bitmap (new file or another PDF page)."""
        self.image_width = int(width)
        self.image_height = int(height)
        self.image_name = name
        self.page_number = page_number
        self.page_count = page_count
        self._reset_editing()
        logger.debug("Loaded %sx%s image %s (page %s/%s)", width, height, name, page_number, page_count)
        self._changed()

    def clear_image(self) -> None:
        self.image_width = 0
        self.image_height = 0
        self.image_name = None
        self.page_number = 1
        self.page_count = 0
        self._reset_editing()
        self.manual_area = ""
        self._changed()

    def reset_all(self) -> None:
        self.clear_image()

    def _reset_editing(self) -> None:
        self.viewport.reset()
        self.calibration.reset()
        self.polygon.clear()
        self._drag = None
        self._pan = None

    # ----- Form inputs -----
    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}")
        if mode != self.mode:
            self.mode = mode
            self._drag = None
            self._changed()

    def set_real_length(self, text: Optional[str]) -> None:
        self.calibration.set_real_length(text)
        self._changed()

    def set_manual_area(self, text: Optional[str]) -> None:
        self.manual_area = "" if text is None else str(text)
        self._changed()

    def reset_scale(self) -> None:
        self.calibration.reset()
        self._changed()

    def clear_polygon(self) -> None:
        self.polygon.clear()
        self._drag = None
        self._changed()

    def close_polygon(self) -> bool:
        closed = self.polygon.close()
        if closed:
            self._changed()
        return closed

    def undo(self) -> bool:
        removed = self.polygon.undo_last()
        if removed:
            if self._drag is not None and self._drag.vertex_index >= len(self.polygon.vertices):
                self._drag = None
            self._changed()
        return removed

    # ----- Pointer -----
    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def is_panning(self) -> bool:
        return self._pan is not None

    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._drag

    def pointer_down(self, pos: CanvasPoint, button: int = BUTTON_LEFT, shift: bool = False) -> bool:
        """Handle a press; returns True when it changed the session."""
        if not self.has_image:
            return False
        pos = CanvasPoint(*pos)
        if button == BUTTON_RIGHT or self.space_down:
            self._pan = on_pan_start(pos)
            return True
        if button != BUTTON_LEFT or self._pan is not None:
            return False
        transform = self.transform()
        p_img = transform.to_image(pos)

        if self.mode == MODE_POLYGON:
            radius = transform.to_image_length(float(self.config['hit_radius_px']))
            idx = self.polygon.hit_test(p_img, radius)
            if idx is not None:
                self._drag = begin_drag(self.polygon, idx)
                self._changed()
                return True

        if self.mode == MODE_SCALE:
            self.calibration.add_or_reset_point(p_img)
            self._changed()
            return True
        if self.polygon.append_vertex(p_img, shift):
            self._changed()
            return True
        return False

    def pointer_move(self, pos: CanvasPoint, shift: bool = False) -> bool:
        if not self.has_image:
            return False
        pos = CanvasPoint(*pos)
        if self._pan is not None:
            on_pan_move(self.viewport, self._pan, pos)
            self._changed()
            return True
        if self._drag is not None:
            update_drag(self.polygon, self._drag, self.transform().to_image(pos), shift)
            self._changed()
            return True
        return False

    def pointer_up(self) -> None:
        """Release always ends whatever gesture is in progress."""
        had_gesture = self._drag is not None or self._pan is not None
        if self._drag is not None and end_drag(self.polygon, self._drag):
            logger.debug("Moved vertex %s", self._drag.vertex_index)
        self._drag = None
        self._pan = None
        if had_gesture:
            self._changed()

    def cancel_interaction(self) -> None:
        """Focus lost: drop gestures and the space modifier so nothing sticks."""
        self.space_down = False
        self.pointer_up()

    def escape(self) -> bool:
        """Escape reverts a drag in progress; returns False when there was none."""
        if self._drag is None:
            return False
        cancel_drag(self.polygon, self._drag)
        self._drag = None
        self._changed()
        return True

    def double_click(self) -> bool:
        if self.mode != MODE_POLYGON:
            return False
        return self.close_polygon()

    def key_space(self, pressed: bool) -> None:
        # Only the button release ends a pan; X11 autorepeat toggles Space while held.
        self.space_down = pressed

    # ----- Viewport -----
    def wheel(self, pos: CanvasPoint, delta_x: float, delta_y: float, zoom_modifier: bool) -> bool:
        if not self.has_image:
            return False
        on_wheel(self.viewport, self.geometry, CanvasPoint(*pos), delta_x, delta_y, zoom_modifier,
                 float(self.config['wheel_zoom_sensitivity']), self._zoom_bounds)
        self._changed()
        return True

    def zoom_in(self) -> None:
        if self.has_image:
            zoom_in(self.viewport, self.geometry, float(self.config['zoom_step']), self._zoom_bounds)
            self._changed()

    def zoom_out(self) -> None:
        if self.has_image:
            zoom_out(self.viewport, self.geometry, float(self.config['zoom_step']), self._zoom_bounds)
            self._changed()

    def rotate(self, clockwise: bool = True) -> None:
        """Turn the view a quarter; traced points stay valid in image space."""
        if not self.has_image:
            return
        if clockwise:
            rotate_right(self.viewport)
        else:
            rotate_left(self.viewport)
        self._drag = None
        self._pan = None
        logger.debug("Rotation now %s quarter turns", self.viewport.rotation_steps)
        self._changed()

    # ----- Outputs -----
    @property
    def meters_per_pixel(self) -> float:
        return self.calibration.meters_per_pixel

    @property
    def mm_per_pixel(self) -> float:
        return self.calibration.mm_per_pixel

    def area(self) -> AreaResult:
        return compute_area(self.polygon.vertices, self.meters_per_pixel, self.manual_area)

    @property
    def reported_area(self) -> int:
        return self.area().reported

    @property
    def vertex_count(self) -> int:
        return len(self.polygon.vertices)

    @property
    def calibration_point_count(self) -> int:
        return len(self.calibration.points)

    @property
    def is_closed(self) -> bool:
        return self.polygon.closed

    @property
    def can_close(self) -> bool:
        return self.polygon.can_close

    @property
    def can_undo(self) -> bool:
        return self.polygon.can_undo

    @property
    def can_save(self) -> bool:
        return self.reported_area > 0

    def image_point_at(self, pos: CanvasPoint) -> ImagePoint:
        return self.transform().to_image(CanvasPoint(*pos))

    # ----- Saved results -----
    def save_current(self, now: Optional[float] = None) -> Optional[SavedResult]:
        """Save the reported area as a result card and clear the outline for the next room."""
        area = self.reported_area
        if area <= 0:
            return None
        name = result_name(self.image_name, len(self.results) + 1, self.page_number, self.page_count)
        mm = self.mm_per_pixel
        card = self.results.save(name, area, mm if mm > 0 else None, now)
        if card is None:
            return None
        self.polygon.clear()
        self.manual_area = ""
        self._drag = None
        self._changed()
        return card

    def remove_result(self, result_id: int) -> bool:
        removed = self.results.remove(result_id)
        if removed:
            self._changed()
        return removed
