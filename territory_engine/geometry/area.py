"""Enclosed area of a closed path on a spherical Earth."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..config import EARTH_RADIUS_M
from ..models import GeoPoint


def spherical_polygon_area_m2(
    points: Sequence[GeoPoint], radius_m: float = EARTH_RADIUS_M
) -> float:
    """Return the area (m²) of the implicitly closed polygon ``points``.

    Uses the spherical-excess corrected shoelace sum
    ``Σ (λ[i+1] − λ[i]) · (2 + sin φ[i] + sin φ[i+1])`` over the cyclic vertex
    sequence, scaled by ``R² / 2``. Valid for polygons that are small relative
    to the Earth, which covers any walked territory.
    """

    assert len(points) >= 3, "area requires at least three vertices"
    lats = np.radians(np.fromiter((p.lat for p in points), dtype=float, count=len(points)))
    lons = np.radians(np.fromiter((p.lon for p in points), dtype=float, count=len(points)))
    next_lats = np.roll(lats, -1)
    next_lons = np.roll(lons, -1)
    total = np.sum((next_lons - lons) * (2.0 + np.sin(lats) + np.sin(next_lats)))
    return float(abs(total * radius_m * radius_m / 2.0))


__all__ = ["spherical_polygon_area_m2"]
