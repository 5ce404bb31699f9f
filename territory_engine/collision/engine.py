"""Collision checks of a candidate start point or path against foreign territories."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..config import (
    COLLISION_CAUTION_M,
    COLLISION_SAFE_M,
    COLLISION_WARNING_M,
    EARTH_RADIUS_M,
)
from ..formatting import format_distance
from ..geo import point_in_polygon, segments_intersect
from ..models import (
    ClaimedTerritory,
    CollisionKind,
    CollisionResult,
    GeoPoint,
    WarningLevel,
)
from .snapshot import TerritorySnapshot


@dataclass(slots=True)
class ProximityBands:
    """Distance bands (metres) mapping proximity to a warning level."""

    safe_m: float = COLLISION_SAFE_M
    caution_m: float = COLLISION_CAUTION_M
    warning_m: float = COLLISION_WARNING_M

    def classify(self, distance_m: Optional[float]) -> WarningLevel:
        if distance_m is None or distance_m > self.safe_m:
            return WarningLevel.SAFE
        if distance_m >= self.caution_m:
            return WarningLevel.CAUTION
        if distance_m >= self.warning_m:
            return WarningLevel.WARNING
        return WarningLevel.DANGER


_PROXIMITY_MESSAGES = {
    WarningLevel.CAUTION: "Foreign territory nearby ({distance} away)",
    WarningLevel.WARNING: "Close to a foreign territory ({distance} away)",
    WarningLevel.DANGER: "About to enter a foreign territory ({distance} away)",
}


class CollisionEngine:
    """Stateless checks against a territory snapshot.

    Territories owned by ``owner_id`` are never compared. A ``VIOLATION``
    result is terminal for the caller's session; the other levels are
    advisory.
    """

    def __init__(
        self,
        bands: ProximityBands | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.bands = bands or ProximityBands()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def check_start_point(
        self,
        point: GeoPoint,
        snapshot: TerritorySnapshot,
        owner_id: Optional[str],
    ) -> CollisionResult:
        """Block a claim that would start inside someone else's territory."""

        foreign = snapshot.foreign(owner_id)
        for territory in foreign:
            if point_in_polygon(point, territory.polygon):
                self._log.warning(
                    "Start point inside territory %s (owner %s)",
                    territory.territory_id,
                    territory.owner_id,
                )
                return CollisionResult(
                    has_collision=True,
                    warning_level=WarningLevel.VIOLATION,
                    kind=CollisionKind.POINT_INSIDE_FOREIGN_TERRITORY,
                    message=f"Cannot start claiming inside {territory.display_name}",
                    distance_to_nearest_m=0.0,
                    territory_id=territory.territory_id,
                )
        return self._proximity(point, foreign)

    def check_path(
        self,
        path: Sequence[GeoPoint],
        snapshot: TerritorySnapshot,
        owner_id: Optional[str],
    ) -> CollisionResult:
        """Check the path recorded so far for boundary crossings and intrusion."""

        points = tuple(path)
        if not points:
            return CollisionResult(False, WarningLevel.SAFE)
        foreign = snapshot.foreign(owner_id)

        crossed = self._find_crossing(points, foreign)
        if crossed is not None:
            self._log.warning(
                "Path crosses boundary of territory %s (owner %s)",
                crossed.territory_id,
                crossed.owner_id,
            )
            return CollisionResult(
                has_collision=True,
                warning_level=WarningLevel.VIOLATION,
                kind=CollisionKind.PATH_CROSSES_FOREIGN_BOUNDARY,
                message=f"Path crosses the boundary of {crossed.display_name}",
                distance_to_nearest_m=0.0,
                territory_id=crossed.territory_id,
            )

        current = points[-1]
        for territory in foreign:
            if point_in_polygon(current, territory.polygon):
                self._log.warning(
                    "Current position inside territory %s (owner %s)",
                    territory.territory_id,
                    territory.owner_id,
                )
                return CollisionResult(
                    has_collision=True,
                    warning_level=WarningLevel.VIOLATION,
                    kind=CollisionKind.POINT_INSIDE_FOREIGN_TERRITORY,
                    message=f"You have entered {territory.display_name}",
                    distance_to_nearest_m=0.0,
                    territory_id=territory.territory_id,
                )

        return self._proximity(current, foreign)

    def _find_crossing(
        self,
        points: Tuple[GeoPoint, ...],
        foreign: Tuple[ClaimedTerritory, ...],
    ) -> Optional[ClaimedTerritory]:
        if len(points) < 2:
            return None
        for territory in foreign:
            polygon = territory.polygon
            count = len(polygon)
            if count < 3:
                continue
            for a, b in zip(points, points[1:]):
                for k in range(count):
                    if segments_intersect(a, b, polygon[k], polygon[(k + 1) % count]):
                        return territory
        return None

    def _proximity(
        self, point: GeoPoint, foreign: Tuple[ClaimedTerritory, ...]
    ) -> CollisionResult:
        nearest = nearest_vertex_distance_m(point, foreign)
        level = self.bands.classify(nearest)
        if level is WarningLevel.SAFE:
            return CollisionResult(False, level, distance_to_nearest_m=nearest)
        message = _PROXIMITY_MESSAGES[level].format(distance=format_distance(nearest))
        self._log.info("Proximity %s: %.1fm to nearest foreign vertex", level.name, nearest)
        return CollisionResult(
            False, level, message=message, distance_to_nearest_m=nearest
        )


def nearest_vertex_distance_m(
    point: GeoPoint,
    territories: Sequence[ClaimedTerritory],
    radius_m: float = EARTH_RADIUS_M,
) -> Optional[float]:
    """Smallest haversine distance from ``point`` to any territory vertex."""

    vertices = [v for t in territories for v in t.polygon]
    if not vertices:
        return None
    lats = np.radians(np.asarray([v.lat for v in vertices], dtype=float))
    lons = np.radians(np.asarray([v.lon for v in vertices], dtype=float))
    phi = np.radians(point.lat)
    lam = np.radians(point.lon)
    h = (
        np.sin((lats - phi) / 2.0) ** 2
        + np.cos(phi) * np.cos(lats) * np.sin((lons - lam) / 2.0) ** 2
    )
    distances = 2.0 * radius_m * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))
    return float(np.min(distances))


__all__ = ["CollisionEngine", "ProximityBands", "nearest_vertex_distance_m"]
