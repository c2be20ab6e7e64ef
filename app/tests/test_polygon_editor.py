import pytest

from planarea.core.model import ImagePoint
from planarea.features.editing.drag import begin_drag, cancel_drag, end_drag, update_drag
from planarea.features.editing.draw import PolygonEditor


def _poly(*pts, closed=False):
    poly = PolygonEditor()
    for p in pts:
        poly.append_vertex(ImagePoint(*p))
    if closed:
        assert poly.close()
    return poly


def test_append_verbatim_without_snap():
    poly = _poly((0, 0))
    poly.append_vertex(ImagePoint(10, 3))
    assert poly.vertices[-1] == ImagePoint(10, 3)


def test_append_with_snap_goes_horizontal():
    poly = _poly((0, 0))
    poly.append_vertex(ImagePoint(10, 3), True)
    assert poly.vertices[-1] == ImagePoint(10, 0)


def test_append_with_snap_goes_vertical():
    poly = _poly((5, 5))
    poly.append_vertex(ImagePoint(7, 40), True)
    assert poly.vertices[-1] == ImagePoint(5, 40)


def test_first_vertex_is_never_snapped():
    poly = PolygonEditor()
    poly.append_vertex(ImagePoint(3, 9), True)
    assert poly.vertices == [ImagePoint(3, 9)]


def test_close_needs_three_vertices():
    poly = _poly((0, 0), (10, 0))
    assert not poly.close()
    assert not poly.closed
    poly.append_vertex(ImagePoint(10, 10))
    assert poly.close()
    assert poly.closed


def test_closed_polygon_rejects_new_vertices():
    poly = _poly((0, 0), (10, 0), (10, 10), closed=True)
    assert not poly.append_vertex(ImagePoint(0, 10))
    assert len(poly) == 3
    assert not poly.can_close


def test_hit_test_after_append_returns_index():
    poly = _poly((0, 0), (50, 50))
    p = ImagePoint(123.4, 56.7)
    poly.append_vertex(p)
    assert poly.hit_test(p, 0.001) == 2


def test_hit_test_prefers_lowest_index():
    poly = _poly((0, 0), (1, 0), (0, 1))
    assert poly.hit_test(ImagePoint(0.4, 0.2), 5) == 0


def test_hit_test_miss_returns_none():
    poly = _poly((0, 0), (100, 0))
    assert poly.hit_test(ImagePoint(50, 50), 8) is None
    assert PolygonEditor().hit_test(ImagePoint(0, 0), 8) is None


def test_undo_last_only_while_open():
    poly = _poly((0, 0), (10, 0), (10, 10))
    assert poly.undo_last()
    assert len(poly) == 2
    poly.append_vertex(ImagePoint(10, 10))
    poly.close()
    assert not poly.undo_last()
    assert len(poly) == 3
    assert not PolygonEditor().undo_last()


def test_clear_reopens():
    poly = _poly((0, 0), (10, 0), (10, 10), closed=True)
    poly.clear()
    assert poly.vertices == []
    assert not poly.closed


def test_drag_moves_vertex_freely():
    poly = _poly((0, 0), (10, 0), (10, 10), closed=True)
    session = begin_drag(poly, 2)
    update_drag(poly, session, ImagePoint(12, 13))
    assert poly.vertices[2] == ImagePoint(12, 13)
    assert end_drag(poly, session)


def test_drag_snaps_to_previous_vertex():
    poly = _poly((0, 0), (10, 0), (10, 10))
    session = begin_drag(poly, 2)
    assert session.anchor == ImagePoint(10, 0)
    update_drag(poly, session, ImagePoint(12, 30), snap=True)
    assert poly.vertices[2] == ImagePoint(10, 30)


def test_drag_of_first_vertex_snaps_to_next():
    poly = _poly((0, 0), (10, 0), (10, 10))
    session = begin_drag(poly, 0)
    assert session.anchor == ImagePoint(10, 0)
    update_drag(poly, session, ImagePoint(-20, 4), snap=True)
    assert poly.vertices[0] == ImagePoint(-20, 0)


def test_drag_of_lone_vertex_ignores_snap():
    poly = _poly((0, 0))
    session = begin_drag(poly, 0)
    assert session.anchor is None
    update_drag(poly, session, ImagePoint(3, 4), snap=True)
    assert poly.vertices[0] == ImagePoint(3, 4)


def test_begin_drag_out_of_range():
    assert begin_drag(_poly((0, 0)), 3) is None


def test_cancel_drag_restores_original():
    poly = _poly((0, 0), (10, 0), (10, 10))
    session = begin_drag(poly, 1)
    update_drag(poly, session, ImagePoint(50, 50))
    cancel_drag(poly, session)
    assert poly.vertices[1] == ImagePoint(10, 0)
    assert not end_drag(poly, session)


@pytest.mark.parametrize("pts,expected", [
    ([(0, 0), (1, 0), (1, 1), (0, 1)], (True, True)),
    ([(0, 0), (1, 0)], (False, True)),
    ([], (False, False)),
])
def test_can_close_and_can_undo(pts, expected):
    poly = _poly(*pts)
    assert (poly.can_close, poly.can_undo) == expected


def test_update_drag_after_vertex_removed_is_ignored():
    poly = _poly((0, 0), (10, 0), (10, 10))
    session = begin_drag(poly, 2)
    poly.undo_last()
    update_drag(poly, session, ImagePoint(50, 50))
    assert poly.vertices == [ImagePoint(0, 0), ImagePoint(10, 0)]
