"""Global pytest fixtures & helpers.

Adds project root to path and provides small geometry builders so tests can
describe shapes in metres around a fixed origin instead of raw degrees.
"""
from __future__ import annotations

import math
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from territory_engine.models import ClaimedTerritory, GeoPoint


ORIGIN = GeoPoint(31.23, 121.47)
METRES_PER_DEGREE = 111_194.9


# --- Factory helpers -------------------------------------------------
def offset(north_m, east_m, origin=ORIGIN):
    """Return the point ``north_m``/``east_m`` metres away from ``origin``."""
    lat = origin.lat + north_m / METRES_PER_DEGREE
    lon = origin.lon + east_m / (METRES_PER_DEGREE * math.cos(math.radians(origin.lat)))
    return GeoPoint(lat, lon)


def circle(radius_m, count, centre=(0.0, 0.0)):
    """Regular polygon vertices (open ring) around ``centre`` in metres."""
    north0, east0 = centre
    return [
        offset(
            north0 + radius_m * math.sin(2 * math.pi * k / count),
            east0 + radius_m * math.cos(2 * math.pi * k / count),
        )
        for k in range(count)
    ]


def square_territory(territory_id="t-1", owner_id="rival", size_m=100.0, corner=(0.0, 0.0), **kwargs):
    north0, east0 = corner
    polygon = (
        offset(north0, east0),
        offset(north0, east0 + size_m),
        offset(north0 + size_m, east0 + size_m),
        offset(north0 + size_m, east0),
    )
    return ClaimedTerritory(
        territory_id=territory_id,
        owner_id=owner_id,
        polygon=polygon,
        area_m2=size_m * size_m,
        **kwargs,
    )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def at():
    """Point builder in metres around the shared test origin."""
    return offset


@pytest.fixture
def closed_loop():
    """Twelve points on a 50 m circle plus a return to the start."""
    ring = circle(50.0, 12)
    return ring + [ring[0]]


@pytest.fixture
def rival_square():
    return square_territory()


class FakeClock:
    """Manually advanced clock usable as ``clock=`` or ``timer=``."""

    def __init__(self, now=0.0):
        self.now = float(now)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_circle():
    return circle


@pytest.fixture
def make_territory():
    return square_territory
