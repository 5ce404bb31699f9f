"""Tests for self-intersection detection, spherical area and validation."""

from __future__ import annotations

import math

import pytest

from territory_engine.geometry import (
    ValidationRules,
    has_path_self_intersection,
    spherical_polygon_area_m2,
    validate_territory,
)
from territory_engine.models import RejectionReason


def _path(at, coords):
    return [at(north, east) for east, north in coords]


FIGURE_EIGHT = [
    (-10, 30), (-40, 30), (-40, -30), (-10, -30),
    (10, 30), (40, 30), (40, -30), (10, -30), (-10, 30),
]


def test_convex_loop_does_not_self_intersect(closed_loop):
    assert not has_path_self_intersection(closed_loop)


def test_figure_eight_detected(at):
    assert has_path_self_intersection(_path(at, FIGURE_EIGHT))


def test_short_paths_never_intersect(at):
    assert not has_path_self_intersection(_path(at, [(0, 0), (10, 10), (0, 10)]))


def test_crossing_inside_exempt_window_is_missed(at):
    # The final segment crosses the first one, but both sit in the
    # head/tail window that tolerates the loop closing on itself.
    path = _path(at, [(0, 0), (0, 20), (0, 40), (30, 40), (30, 10), (-10, 10)])
    assert not has_path_self_intersection(path)
    assert has_path_self_intersection(path, exempt_segments=0)


def test_spherical_area_of_square(at):
    square = [at(0, 0), at(0, 100), at(100, 100), at(100, 0)]
    assert spherical_polygon_area_m2(square) == pytest.approx(10_000.0, rel=0.01)


def test_area_independent_of_winding(at):
    square = [at(0, 0), at(0, 100), at(100, 100), at(100, 0)]
    assert spherical_polygon_area_m2(square) == pytest.approx(
        spherical_polygon_area_m2(list(reversed(square)))
    )


def test_area_of_circle_within_five_percent(closed_loop):
    area = spherical_polygon_area_m2(closed_loop)
    assert area == pytest.approx(math.pi * 50.0 ** 2, rel=0.05)


def test_valid_loop(closed_loop):
    verdict = validate_territory(closed_loop)
    assert verdict.is_valid
    assert verdict.reason is None
    assert verdict.point_count == 13
    assert verdict.path_length_m > 300.0
    assert verdict.area_m2 > 7000.0


def test_too_few_points(closed_loop):
    verdict = validate_territory(closed_loop[:9])
    assert not verdict.is_valid
    assert verdict.reason is RejectionReason.INSUFFICIENT_POINTS
    assert verdict.area_m2 == 0.0


def test_too_short(make_circle):
    ring = make_circle(3.0, 12)
    verdict = validate_territory(ring + [ring[0]])
    assert verdict.reason is RejectionReason.INSUFFICIENT_DISTANCE
    assert verdict.path_length_m < 50.0


def test_self_intersecting_loop_rejected(at):
    coords = [
        (-10, 30), (-40, 30), (-40, 0), (-40, -30), (-10, -30),
        (10, 30), (40, 30), (40, 0), (40, -30), (10, -30), (-12, 30),
    ]
    verdict = validate_territory(_path(at, coords))
    assert verdict.reason is RejectionReason.SELF_INTERSECTING
    assert verdict.area_m2 == 0.0


def test_too_small_area(at):
    # Thin 60 m x 1 m sliver: long enough, but encloses ~60 m².
    coords = [(e, 0) for e in range(0, 60, 10)] + [(e, 1) for e in range(60, -1, -10)]
    verdict = validate_territory(_path(at, coords))
    assert verdict.reason is RejectionReason.INSUFFICIENT_AREA
    assert 0.0 < verdict.area_m2 < 100.0


def test_rules_are_configurable(closed_loop):
    verdict = validate_territory(closed_loop, ValidationRules(min_area_m2=10_000.0))
    assert verdict.reason is RejectionReason.INSUFFICIENT_AREA


def test_validation_is_repeatable(closed_loop, make_circle, at):
    tiny = make_circle(3.0, 12)
    sliver = [(e, 0) for e in range(0, 60, 10)] + [(e, 1) for e in range(60, -1, -10)]
    crossing = [
        (-10, 30), (-40, 30), (-40, 0), (-40, -30), (-10, -30),
        (10, 30), (40, 30), (40, 0), (40, -30), (10, -30), (-12, 30),
    ]
    cases = {
        None: closed_loop,
        RejectionReason.INSUFFICIENT_POINTS: closed_loop[:9],
        RejectionReason.INSUFFICIENT_DISTANCE: tiny + [tiny[0]],
        RejectionReason.SELF_INTERSECTING: _path(at, crossing),
        RejectionReason.INSUFFICIENT_AREA: _path(at, sliver),
    }
    for reason, points in cases.items():
        first = validate_territory(points)
        assert first.reason is reason
        assert validate_territory(tuple(points)) == first
