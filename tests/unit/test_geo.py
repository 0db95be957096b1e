import pytest

from landmarks.client.viewport import normalize_center
from landmarks.utils.geo import clamp, format_distance, radius_for_zoom


@pytest.mark.parametrize("zoom,expected", [
    (10, 10000),   # 50000 clamped down
    (12, 10000),   # 12500 clamped down
    (13, 6250),
    (14, 3125),
    (15, 1562.5),
    (16, 1000),    # 781.25 clamped up
    (20, 1000),    # ~48.8 clamped up
    (3, 10000),
])
def test_radius_for_zoom(zoom, expected):
    assert radius_for_zoom(zoom) == pytest.approx(expected)


def test_radius_for_zoom_fractional():
    assert radius_for_zoom(13.5) == pytest.approx(50000 / 2 ** 3.5)


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


def test_format_distance():
    assert format_distance(24.6) == "25m away"
    assert format_distance(999.4) == "999m away"
    assert format_distance(1090.2) == "1.1km away"
    assert format_distance(4999) == "5.0km away"


def test_normalize_center_wraps_longitude():
    assert normalize_center(40.0, -74.0) == (40.0, -74.0)
    assert normalize_center(40.0, 286.0) == pytest.approx((40.0, -74.0))
    assert normalize_center(95.0, -434.0) == pytest.approx((90.0, -74.0))


@pytest.mark.parametrize("lat,lng", [
    (48.8584, 2.2945),
    (40.7128, -74.0060),
    (-33.8568, 151.2153),
    (0.0, -180.0),
    (0.0, 179.999),
])
def test_normalize_center_keeps_in_range_longitude_exact(lat, lng):
    assert normalize_center(lat, lng) == (lat, lng)


def test_normalize_center_wraps_antimeridian():
    assert normalize_center(0.0, 180.0) == (0.0, -180.0)
    assert normalize_center(0.0, 540.0) == (0.0, -180.0)
