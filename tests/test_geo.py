"""Tests for the spherical distance and planar predicate primitives."""

from __future__ import annotations

import math

import pytest

from territory_engine.formatting import (
    format_area,
    format_distance,
    format_duration,
    format_speed,
)
from territory_engine.geo import (
    distance_m,
    path_length_m,
    point_in_polygon,
    segments_intersect,
    wgs84_to_gcj02,
)
from territory_engine.models import GeoPoint


def test_distance_one_degree_of_latitude():
    d = distance_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
    assert d == pytest.approx(6_371_000 * math.pi / 180, rel=1e-9)


def test_distance_is_symmetric_and_zero_for_same_point(at):
    a, b = at(0, 0), at(30, 40)
    assert distance_m(a, a) == 0.0
    assert distance_m(a, b) == pytest.approx(distance_m(b, a))
    assert distance_m(a, b) == pytest.approx(50.0, rel=1e-3)


def test_path_length_sums_consecutive_legs(at):
    points = [at(0, 0), at(0, 30), at(40, 30)]
    assert path_length_m(points) == pytest.approx(70.0, rel=1e-3)
    assert path_length_m(points[:1]) == 0.0
    assert path_length_m([]) == 0.0


def test_point_in_polygon(at, rival_square):
    polygon = rival_square.polygon
    assert point_in_polygon(at(50, 50), polygon)
    assert not point_in_polygon(at(150, 50), polygon)
    assert not point_in_polygon(at(-10, -10), polygon)


def test_point_in_polygon_needs_three_vertices(at):
    assert not point_in_polygon(at(0, 0), [at(-1, -1), at(1, 1)])
    assert not point_in_polygon(at(0, 0), [])


def test_segments_intersect_strict_crossing(at):
    p1, p2 = at(-10, -10), at(10, 10)
    p3, p4 = at(-10, 10), at(10, -10)
    assert segments_intersect(p1, p2, p3, p4)
    assert segments_intersect(p3, p4, p1, p2)


def test_segments_sharing_an_endpoint_do_not_intersect(at):
    shared = at(0, 0)
    assert not segments_intersect(shared, at(10, 0), shared, at(0, 10))


def test_collinear_overlap_is_not_an_intersection(at):
    assert not segments_intersect(at(0, 0), at(0, 20), at(0, 10), at(0, 30))


def test_disjoint_segments(at):
    assert not segments_intersect(at(0, 0), at(0, 10), at(20, 0), at(20, 10))


def test_gcj02_identity_outside_china():
    london = GeoPoint(51.5, -0.12)
    assert wgs84_to_gcj02(london) == london


def test_gcj02_shifts_points_in_china():
    beijing = GeoPoint(39.9, 116.4)
    shifted = wgs84_to_gcj02(beijing)
    assert shifted != beijing
    assert 50.0 < distance_m(beijing, shifted) < 1000.0


@pytest.mark.parametrize(
    "value, expected",
    [(850, "850 m"), (999.9, "999 m"), (1234, "1.2 km")],
)
def test_format_distance(value, expected):
    assert format_distance(value) == expected


def test_format_area_and_speed_and_duration():
    assert format_area(1500) == "1500 m²"
    assert format_area(2_500_000) == "2.50 km²"
    assert format_speed(10.0) == "36.0 km/h"
    assert format_duration(125) == "2m 5s"
    assert format_duration(42) == "42s"
