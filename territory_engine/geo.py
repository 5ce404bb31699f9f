"""Geospatial primitives on a spherical Earth.

Coordinates are handled as :class:`GeoPoint` values. Planar predicates
(point-in-polygon, segment intersection) treat longitude as X and latitude as
Y, which is adequate for the few hundred metres a walked territory spans.
"""

from __future__ import annotations

import math
from typing import Sequence

from .config import EARTH_RADIUS_M
from .models import GeoPoint


def distance_m(a: GeoPoint, b: GeoPoint, radius_m: float = EARTH_RADIUS_M) -> float:
    """Return the haversine great-circle distance between two points in metres."""

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return radius_m * c


def path_length_m(points: Sequence[GeoPoint]) -> float:
    """Return the cumulative distance between consecutive points (open path)."""

    total = 0.0
    for prev, curr in zip(points, points[1:]):
        total += distance_m(prev, curr)
    return total


def point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """Ray-casting parity test; the polygon is implicitly closed.

    Polygons with fewer than three vertices never contain a point.
    """

    count = len(polygon)
    if count < 3:
        return False

    x, y = point.lon, point.lat
    inside = False
    j = count - 1
    for i in range(count):
        xi, yi = polygon[i].lon, polygon[i].lat
        xj, yj = polygon[j].lon, polygon[j].lat
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def _orientation(a: GeoPoint, b: GeoPoint, c: GeoPoint) -> float:
    """Signed area of triangle abc (positive when counter-clockwise)."""

    return (b.lon - a.lon) * (c.lat - a.lat) - (b.lat - a.lat) * (c.lon - a.lon)


def segments_intersect(p1: GeoPoint, p2: GeoPoint, p3: GeoPoint, p4: GeoPoint) -> bool:
    """Return True when segment p1-p2 properly crosses segment p3-p4.

    Only strict crossings count: segments that share an endpoint, touch, or
    are collinear are reported as non-intersecting. This is a known
    simplification rather than a robust geometric predicate.
    """

    d1 = _orientation(p3, p4, p1)
    d2 = _orientation(p3, p4, p2)
    d3 = _orientation(p1, p2, p3)
    d4 = _orientation(p1, p2, p4)
    return d1 * d2 < 0 and d3 * d4 < 0


# ---------------------------------------------------------------------------
# WGS-84 -> GCJ-02 (map datum used by mainland China basemaps)
# ---------------------------------------------------------------------------
_GCJ_A = 6378245.0
_GCJ_EE = 0.00669342162296594323


def _in_mainland_china(point: GeoPoint) -> bool:
    # Coarse bounding box; Hong Kong, Macau and Taiwan are not special-cased.
    return 73.66 <= point.lon <= 135.05 and 3.86 <= point.lat <= 53.55


def _gcj_lat_offset(x: float, y: float) -> float:
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def _gcj_lon_offset(x: float, y: float) -> float:
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


def wgs84_to_gcj02(point: GeoPoint) -> GeoPoint:
    """Shift a raw GPS fix onto the GCJ-02 datum; identity outside China."""

    if not _in_mainland_china(point):
        return point

    d_lat = _gcj_lat_offset(point.lon - 105.0, point.lat - 35.0)
    d_lon = _gcj_lon_offset(point.lon - 105.0, point.lat - 35.0)
    rad_lat = math.radians(point.lat)
    magic = 1 - _GCJ_EE * math.sin(rad_lat) ** 2
    sqrt_magic = math.sqrt(magic)
    d_lat = (d_lat * 180.0) / ((_GCJ_A * (1 - _GCJ_EE)) / (magic * sqrt_magic) * math.pi)
    d_lon = (d_lon * 180.0) / (_GCJ_A / sqrt_magic * math.cos(rad_lat) * math.pi)
    return GeoPoint(point.lat + d_lat, point.lon + d_lon)


__all__ = [
    "distance_m",
    "path_length_m",
    "point_in_polygon",
    "segments_intersect",
    "wgs84_to_gcj02",
]
