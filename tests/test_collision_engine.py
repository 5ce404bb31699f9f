"""Tests for start-point and path collision checks."""

from __future__ import annotations

import pytest

from territory_engine.collision import (
    CollisionEngine,
    ProximityBands,
    TerritorySnapshot,
    nearest_vertex_distance_m,
)
from territory_engine.models import CollisionKind, WarningLevel


@pytest.fixture
def engine():
    return CollisionEngine()


@pytest.fixture
def snapshot(rival_square):
    return TerritorySnapshot((rival_square,), fetched_at=0.0)


def test_start_inside_foreign_territory_is_violation(engine, snapshot, at):
    result = engine.check_start_point(at(50, 50), snapshot, "me")
    assert result.is_violation
    assert result.has_collision
    assert result.kind is CollisionKind.POINT_INSIDE_FOREIGN_TERRITORY
    assert result.territory_id == "t-1"
    assert result.message == "Cannot start claiming inside Unnamed territory"


def test_start_inside_own_territory_is_allowed(engine, snapshot, at):
    result = engine.check_start_point(at(50, 50), snapshot, "rival")
    assert not result.has_collision
    assert result.warning_level is WarningLevel.SAFE
    assert result.distance_to_nearest_m is None


def test_far_start_is_safe_without_message(engine, snapshot, at):
    result = engine.check_start_point(at(100, 300), snapshot, "me")
    assert result.warning_level is WarningLevel.SAFE
    assert result.message is None
    assert result.distance_to_nearest_m == pytest.approx(200.0, rel=1e-3)


def test_path_near_territory_warns(engine, snapshot, at):
    result = engine.check_path([at(130, 160), at(100, 130)], snapshot, "me")
    assert not result.has_collision
    assert result.warning_level is WarningLevel.WARNING
    assert result.distance_to_nearest_m == pytest.approx(30.0, rel=1e-2)
    assert result.message.startswith("Close to a foreign territory")


def test_path_crossing_boundary_is_violation(engine, snapshot, at):
    path = [at(50, -50), at(50, -10), at(50, 10)]
    result = engine.check_path(path, snapshot, "me")
    assert result.is_violation
    assert result.kind is CollisionKind.PATH_CROSSES_FOREIGN_BOUNDARY
    assert result.territory_id == "t-1"


def test_single_point_inside_is_violation(engine, snapshot, at):
    result = engine.check_path([at(20, 20)], snapshot, "me")
    assert result.kind is CollisionKind.POINT_INSIDE_FOREIGN_TERRITORY
    assert result.message == "You have entered Unnamed territory"


def test_empty_path_and_empty_snapshot_are_safe(engine, at):
    assert engine.check_path([], TerritorySnapshot(), "me").warning_level is WarningLevel.SAFE
    result = engine.check_path([at(0, 0), at(0, 10)], TerritorySnapshot(), "me")
    assert result.warning_level is WarningLevel.SAFE


def test_inactive_territories_ignored(engine, make_territory, at):
    snapshot = TerritorySnapshot((make_territory(is_active=False),))
    assert not engine.check_start_point(at(50, 50), snapshot, "me").has_collision


def test_named_territory_in_message(engine, make_territory, at):
    snapshot = TerritorySnapshot((make_territory(name="Riverside"),))
    result = engine.check_start_point(at(50, 50), snapshot, "me")
    assert result.message == "Cannot start claiming inside Riverside"


@pytest.mark.parametrize(
    "distance, level",
    [
        (None, WarningLevel.SAFE),
        (150.0, WarningLevel.SAFE),
        (100.0, WarningLevel.CAUTION),
        (60.0, WarningLevel.CAUTION),
        (50.0, WarningLevel.CAUTION),
        (49.9, WarningLevel.WARNING),
        (30.0, WarningLevel.WARNING),
        (25.0, WarningLevel.WARNING),
        (24.9, WarningLevel.DANGER),
        (0.0, WarningLevel.DANGER),
    ],
)
def test_proximity_bands(distance, level):
    assert ProximityBands().classify(distance) is level


def test_nearest_vertex_distance(make_territory, at):
    territories = [make_territory(), make_territory("t-2", corner=(500.0, 500.0))]
    assert nearest_vertex_distance_m(at(-40, -30), territories) == pytest.approx(50.0, rel=1e-3)
    assert nearest_vertex_distance_m(at(0, 0), []) is None
