"""Tests for route geometry helpers."""

import math

import pytest

from app.core.geometry import (
    calculate_route_distance,
    haversine_distance,
    perpendicular_distance,
    route_bounds,
    simplify_route,
)

# One degree of arc on a 6,371 km sphere
DEG_M = 6_371_000 * math.pi / 180


def test_haversine_same_point_is_zero():
    assert haversine_distance(25.7931, -108.9821, 25.7931, -108.9821) == 0


def test_haversine_is_symmetric():
    a = (25.7931, -108.9821)
    b = (25.8012, -108.9702)
    assert haversine_distance(*a, *b) == pytest.approx(haversine_distance(*b, *a))


def test_haversine_one_degree_of_latitude():
    assert haversine_distance(0, 0, 1, 0) == pytest.approx(DEG_M, rel=1e-9)


def test_haversine_city_scale():
    """~0.01° of longitude at ~25.8°N is roughly 1 km."""
    d = haversine_distance(25.79, -108.99, 25.79, -108.98)
    assert 990 < d < 1010


def test_haversine_antipodal_points():
    """Rounding near antipodes must not leave the domain of sqrt."""
    for lat in (-87.5, -45.0, 0.0, 30.0, 89.9):
        d = haversine_distance(lat, 0, -lat, 180)
        assert d == pytest.approx(math.pi * 6_371_000, rel=1e-6)
    assert calculate_route_distance([(0, -87.5), (180, 87.5)]) == pytest.approx(math.pi * 6_371_000)


def test_haversine_out_of_range_latitude_does_not_raise():
    d = haversine_distance(100, 0, 80, 180)
    assert math.isfinite(d)
    assert d >= 0


def test_haversine_nan_propagates():
    assert math.isnan(haversine_distance(math.nan, 0, 0, 0))


def test_route_distance_degenerate():
    assert calculate_route_distance([]) == 0
    assert calculate_route_distance([(-108.98, 25.79)]) == 0
    assert calculate_route_distance([[0, 0], [0, 0], [0, 0]]) == 0


def test_route_distance_sums_segments():
    """Coordinates are (lon, lat): two 1° steps north."""
    coords = [(0, 0), (0, 1), (0, 2)]
    assert calculate_route_distance(coords) == pytest.approx(2 * DEG_M, rel=1e-9)


def test_route_distance_extra_point_never_shorter():
    direct = [(-108.99, 25.79), (-108.97, 25.80)]
    detour = [(-108.99, 25.79), (-108.98, 25.81), (-108.97, 25.80)]
    assert calculate_route_distance(detour) >= calculate_route_distance(direct)


def test_perpendicular_distance_inside_segment():
    assert perpendicular_distance((0, 1), (-1, 0), (1, 0)) == pytest.approx(1.0)


def test_perpendicular_distance_clamps_to_endpoints():
    # Beyond the end: distance to (1, 0), not to the infinite line
    assert perpendicular_distance((3, 0), (0, 0), (1, 0)) == pytest.approx(2.0)
    # Before the start
    assert perpendicular_distance((-3, 4), (0, 0), (1, 0)) == pytest.approx(5.0)


def test_perpendicular_distance_zero_length_segment():
    assert perpendicular_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_perpendicular_distance_nan_propagates():
    assert math.isnan(perpendicular_distance((math.nan, 0), (0, 0), (1, 0)))


def test_simplify_short_routes_unchanged():
    for coords in ([], [(1.0, 2.0)], [(1.0, 2.0), (1.0, 2.0)]):
        assert simplify_route(coords, tolerance=10) == coords


def test_simplify_drops_collinear_points():
    coords = [(0, 0), (0.00001, 0), (0.00002, 0)]
    assert simplify_route(coords) == [(0, 0), (0.00002, 0)]


def test_simplify_drops_point_exactly_at_tolerance():
    """Only points strictly farther than the tolerance survive."""
    coords = [(0, 0), (1, 0.5), (2, 0)]
    assert simplify_route(coords, tolerance=0.5) == [(0, 0), (2, 0)]
    assert simplify_route(coords, tolerance=0.49) == coords


def test_simplify_keeps_corners():
    coords = [(0, 0), (0.001, 0.001), (0.002, 0)]
    assert simplify_route(coords) == coords


def test_simplify_tests_against_original_neighbours():
    """Every interior point of a straight line goes, however long the line is."""
    coords = [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert simplify_route(coords, tolerance=0.5) == [(0, 0), (3, 0)]


def test_simplify_never_grows_and_keeps_endpoints():
    coords = [(-108.98 + i * 0.0005, 25.79 + (i % 3) * 0.0003) for i in range(20)]
    for tol in (0.0, 0.0001, 0.001, 1.0):
        out = simplify_route(coords, tol)
        assert len(out) <= len(coords)
        assert out[0] == coords[0]
        assert out[-1] == coords[-1]


def test_route_bounds():
    coords = [(-108.99, 25.79), (-108.97, 25.81), (-108.98, 25.78)]
    assert route_bounds(coords) == pytest.approx((-108.99, 25.78, -108.97, 25.81))
    assert route_bounds([(-108.99, 25.79)]) is None
