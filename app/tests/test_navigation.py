import math

import pytest

from planarea.core.model import CanvasPoint
from planarea.features.navigation.pan import on_pan_move, on_pan_start, pan_by
from planarea.features.navigation.rotate import rotate_left, rotate_right
from planarea.features.navigation.viewport import ViewGeometry, ViewportState, compose
from planarea.features.navigation.zoom import (
    ZOOM_MAX,
    ZOOM_MIN,
    on_wheel,
    wheel_zoom_factor,
    zoom_at,
    zoom_in,
    zoom_out,
)

GEO = ViewGeometry(1000, 650, 2000, 1000)


@pytest.mark.parametrize("steps", [0, 1, 2, 3])
@pytest.mark.parametrize("factor", [1.5, 0.6, 3.0])
def test_zoom_at_keeps_point_under_cursor(steps, factor):
    vp = ViewportState(zoom=1.3, pan=CanvasPoint(25, -40), rotation_steps=steps)
    cursor = CanvasPoint(312.0, 401.5)
    before = compose(vp, GEO).to_image(cursor)
    zoom_at(vp, GEO, cursor, factor)
    after = compose(vp, GEO).to_image(cursor)
    assert after == pytest.approx(before)
    assert vp.zoom == pytest.approx(1.3 * factor)


def test_zoom_is_clamped_to_bounds():
    vp = ViewportState(zoom=7.0)
    zoom_at(vp, GEO, CanvasPoint(500, 325), 10.0)
    assert vp.zoom == ZOOM_MAX
    zoom_at(vp, GEO, CanvasPoint(500, 325), 1e-6)
    assert vp.zoom == ZOOM_MIN


def test_zoom_in_and_out_about_centre():
    vp = ViewportState()
    centre = CanvasPoint(500, 325)
    before = compose(vp, GEO).to_image(centre)
    zoom_in(vp, GEO)
    assert vp.zoom == pytest.approx(1.2)
    zoom_out(vp, GEO)
    assert vp.zoom == pytest.approx(1.0)
    assert compose(vp, GEO).to_image(centre) == pytest.approx(before)


def test_wheel_factor_is_exponential():
    assert wheel_zoom_factor(-100) == pytest.approx(math.exp(0.15))
    assert wheel_zoom_factor(100) * wheel_zoom_factor(-100) == pytest.approx(1.0)


def test_plain_wheel_pans_by_deltas():
    vp = ViewportState()
    on_wheel(vp, GEO, CanvasPoint(0, 0), 10, 20, zoom_modifier=False)
    assert vp.pan == CanvasPoint(-10, -20)
    assert vp.zoom == 1.0


def test_modifier_wheel_zooms_in_on_scroll_up():
    vp = ViewportState()
    on_wheel(vp, GEO, CanvasPoint(200, 200), 0, -100, zoom_modifier=True)
    assert vp.zoom > 1.0


def test_pan_is_unclamped():
    vp = ViewportState()
    pan_by(vp, -5000, 7000)
    assert vp.pan == CanvasPoint(-5000, 7000)


def test_pan_session_accumulates_moves():
    vp = ViewportState()
    session = on_pan_start(CanvasPoint(10, 10))
    on_pan_move(vp, session, CanvasPoint(15, 20))
    on_pan_move(vp, session, CanvasPoint(5, 20))
    assert vp.pan == CanvasPoint(-5, 10)


def test_rotation_cycles_modulo_four_and_resets_view():
    vp = ViewportState(zoom=2.0, pan=CanvasPoint(3, 4))
    rotate_right(vp)
    assert vp.rotation_steps == 1
    assert vp.zoom == 1.0 and vp.pan == CanvasPoint(0, 0)
    for _ in range(3):
        rotate_right(vp)
    assert vp.rotation_steps == 0
    rotate_left(vp)
    assert vp.rotation_steps == 3
