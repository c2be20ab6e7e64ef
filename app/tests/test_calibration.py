import pytest

from planarea.core.model import ImagePoint
from planarea.features.scale.calibration import CalibrationLine


def _line(a, b, length):
    cal = CalibrationLine()
    cal.add_or_reset_point(ImagePoint(*a))
    cal.add_or_reset_point(ImagePoint(*b))
    cal.set_real_length(length)
    return cal


def test_meters_per_pixel_from_two_points():
    cal = _line((100, 100), (1100, 100), "5000")
    assert cal.pixel_distance == 1000.0
    assert cal.meters_per_pixel == pytest.approx(0.005)
    assert cal.mm_per_pixel == pytest.approx(5.0)


@pytest.mark.parametrize("a,b,length", [
    ((3, 4), (0, 0), "250"),
    ((10, 10), (10, 310), "1234.5"),
])
def test_ratio_matches_formula(a, b, length):
    cal = _line(a, b, length)
    expected = (float(length) / 1000) / cal.pixel_distance
    assert cal.meters_per_pixel == pytest.approx(expected)


def test_zero_length_line_gives_zero_ratio():
    cal = _line((50, 50), (50, 50), "1000")
    assert cal.pixel_distance == 0.0
    assert cal.meters_per_pixel == 0.0


@pytest.mark.parametrize("length", ["", "abc", "0", "-5", "nan", "inf", None])
def test_unusable_length_gives_zero_ratio(length):
    cal = _line((0, 0), (100, 0), length)
    assert cal.meters_per_pixel == 0.0
    assert cal.mm_per_pixel == 0.0


def test_single_point_has_no_distance():
    cal = CalibrationLine()
    cal.add_or_reset_point(ImagePoint(1, 1))
    cal.set_real_length("1000")
    assert not cal.is_complete
    assert cal.pixel_distance == 0.0
    assert cal.meters_per_pixel == 0.0
    assert cal.midpoint is None


def test_third_click_starts_new_line():
    cal = _line((0, 0), (10, 0), "100")
    cal.add_or_reset_point(ImagePoint(5, 5))
    assert cal.points == [ImagePoint(5, 5)]
    assert cal.real_length == "100"


def test_midpoint_and_reset():
    cal = _line((0, 0), (10, 20), "100")
    assert cal.midpoint == ImagePoint(5, 10)
    cal.reset()
    assert cal.points == []
    assert cal.real_length == ""
