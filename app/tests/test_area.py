import pytest

from planarea.core.area import compute_area, parse_number, round_area

SQUARE_200 = [(200, 200), (400, 200), (400, 400), (200, 400)]


@pytest.mark.parametrize("text,expected", [
    ("12", 12.0),
    (" 3.5 ", 3.5),
    ("1 250,5", 1250.5),
    ("", 0.0),
    ("abc", 0.0),
    ("nan", 0.0),
    ("-inf", 0.0),
    (None, 0.0),
    (7, 7.0),
])
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_physical_area_from_scale():
    res = compute_area(SQUARE_200, 0.005)
    assert res.pixel_area == 40000.0
    assert res.physical_area == pytest.approx(1.0)
    assert res.reported == 1
    assert res.perimeter_m == pytest.approx(4.0)


def test_no_scale_means_zero_physical_area():
    res = compute_area(SQUARE_200, 0.0)
    assert res.pixel_area == 40000.0
    assert res.physical_area == 0.0
    assert res.reported == 0


def test_degenerate_polygon_reports_zero():
    assert compute_area([(0, 0), (100, 100)], 0.01).reported == 0


def test_manual_override_wins():
    res = compute_area(SQUARE_200, 0.005, "57.6")
    assert res.uses_manual
    assert res.reported == 58


@pytest.mark.parametrize("manual", ["0", "-3", "x", "", None])
def test_unusable_manual_falls_back_to_computed(manual):
    res = compute_area(SQUARE_200, 0.01, manual)
    assert not res.uses_manual
    assert res.reported == 4


def test_rounding_only_at_reporting():
    res = compute_area([(0, 0), (150, 0), (150, 100), (0, 100)], 0.01)
    assert res.physical_area == pytest.approx(1.5)
    assert res.reported == 2


def test_round_area_half_up():
    assert round_area(2.5) == 3
    assert round_area(0.49) == 0
