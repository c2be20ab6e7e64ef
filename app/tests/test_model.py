import pytest

from planarea.core.model import (
    CanvasPoint,
    ImagePoint,
    clamp,
    distance,
    point_in_radius,
    polygon_area,
    polygon_centroid,
    polygon_perimeter,
    shoelace_area,
    snap_to_axis,
)


def test_distance_is_euclidean():
    assert distance(ImagePoint(0, 0), ImagePoint(3, 4)) == 5.0


def test_clamp_bounds():
    assert clamp(0.1, 0.2, 8) == 0.2
    assert clamp(9, 0.2, 8) == 8
    assert clamp(2.5, 0.2, 8) == 2.5


def test_point_in_radius_includes_boundary():
    assert point_in_radius((0, 0), (3, 4), 5)
    assert not point_in_radius((0, 0), (3, 4), 4.99)


def test_unit_square_area():
    assert polygon_area([(0, 0), (1, 0), (1, 1), (0, 1)]) == 1.0


def test_triangle_area():
    assert polygon_area([(0, 0), (4, 0), (0, 3)]) == 6.0


def test_degenerate_polygons_have_zero_area():
    assert polygon_area([]) == 0.0
    assert polygon_area([(5, 5)]) == 0.0
    assert polygon_area([(0, 0), (10, 10)]) == 0.0


def test_shoelace_is_signed_by_orientation():
    ccw = [(0, 0), (0, 1), (1, 1), (1, 0)]
    assert shoelace_area(ccw) == -1.0
    assert polygon_area(ccw) == 1.0


def test_self_intersecting_bowtie_is_accepted():
    # The two lobes cancel; the shoelace value is not the enclosed area.
    bowtie = [(0, 0), (2, 2), (2, 0), (0, 2)]
    assert polygon_area(bowtie) == 0.0


def test_perimeter_of_square():
    assert polygon_perimeter([(0, 0), (2, 0), (2, 2), (0, 2)]) == 8.0
    assert polygon_perimeter([(0, 0)]) == 0.0


def test_centroid_of_rectangle():
    c = polygon_centroid([(0, 0), (4, 0), (4, 2), (0, 2)])
    assert c == pytest.approx((2.0, 1.0))


def test_centroid_falls_back_to_average_for_collinear_points():
    assert polygon_centroid([(0, 0), (2, 0), (4, 0)]) == pytest.approx((2.0, 0.0))
    assert polygon_centroid([]) is None


def test_snap_to_axis_prefers_larger_delta():
    anchor = ImagePoint(0, 0)
    assert snap_to_axis(ImagePoint(10, 3), anchor) == ImagePoint(10, 0)
    assert snap_to_axis(ImagePoint(2, -7), anchor) == ImagePoint(0, -7)
    # Ties snap horizontally
    assert snap_to_axis(ImagePoint(5, 5), anchor) == ImagePoint(5, 0)


def test_point_types_are_distinct():
    assert type(ImagePoint(1, 2)) is not type(CanvasPoint(1, 2))
