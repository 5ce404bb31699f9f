"""Persisted territory record shape and row parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from ..config import TERRITORY_POLYGON_SRID
from ..errors import TerritoryDataError
from ..models import ClaimedTerritory, GeoPoint

# (min_lat, max_lat, min_lon, max_lon)
BoundingBox = Tuple[float, float, float, float]


@dataclass(slots=True)
class TerritoryRecord:
    """Everything the territories table stores for one claim."""

    owner_id: str
    path: List[Dict[str, float]]
    polygon_wkt: str
    bbox: BoundingBox
    area_m2: float
    point_count: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    is_active: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Return the insert payload keyed by the persisted column names."""

        min_lat, max_lat, min_lon, max_lon = self.bbox
        payload: Dict[str, Any] = {
            "user_id": self.owner_id,
            "path": self.path,
            "polygon": self.polygon_wkt,
            "bbox_min_lat": min_lat,
            "bbox_max_lat": max_lat,
            "bbox_min_lon": min_lon,
            "bbox_max_lon": max_lon,
            "area": self.area_m2,
            "point_count": self.point_count,
            "started_at": self.started_at.isoformat(),
            "is_active": self.is_active,
        }
        if self.completed_at is not None:
            payload["completed_at"] = self.completed_at.isoformat()
        payload.update(self.extra)
        return payload


def to_polygon(points: Sequence[GeoPoint]) -> Polygon:
    """Build a lon/lat (x/y) shapely polygon; shapely closes the ring."""

    if len(points) < 3:
        raise ValueError("A territory polygon needs at least three points")
    return Polygon([(p.lon, p.lat) for p in points])


def _ewkt(polygon: Polygon, srid: int) -> str:
    return f"SRID={srid};{polygon.wkt}"


def polygon_to_ewkt(points: Sequence[GeoPoint], srid: int = TERRITORY_POLYGON_SRID) -> str:
    """Return ``SRID=<srid>;POLYGON ((lon lat, ...))`` with the ring closed."""

    return _ewkt(to_polygon(points), srid)


def build_territory_record(
    owner_id: str,
    points: Sequence[GeoPoint],
    area_m2: float,
    started_at: datetime,
    completed_at: Optional[datetime] = None,
) -> TerritoryRecord:
    """Assemble the record for a validated loop."""

    polygon = to_polygon(points)
    min_lon, min_lat, max_lon, max_lat = polygon.bounds
    return TerritoryRecord(
        owner_id=owner_id,
        path=[{"lat": p.lat, "lon": p.lon} for p in points],
        polygon_wkt=_ewkt(polygon, TERRITORY_POLYGON_SRID),
        bbox=(min_lat, max_lat, min_lon, max_lon),
        area_m2=area_m2,
        point_count=len(points),
        started_at=started_at,
        completed_at=completed_at or datetime.now(timezone.utc),
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def territory_from_row(row: Mapping[str, Any]) -> ClaimedTerritory:
    """Parse one stored territory row.

    Path entries without both ``lat`` and ``lon`` are skipped.

    Raises:
        TerritoryDataError: If the id, owner or path is missing or malformed.
    """

    try:
        territory_id = str(row["id"])
        owner_id = str(row["user_id"])
        raw_path = row["path"]
    except KeyError as exc:
        raise TerritoryDataError(f"Territory row missing field {exc}") from exc
    if not isinstance(raw_path, list):
        raise TerritoryDataError(f"Territory {territory_id} has a non-list path")

    polygon: List[GeoPoint] = []
    for entry in raw_path:
        if not isinstance(entry, Mapping):
            continue
        lat, lon = entry.get("lat"), entry.get("lon")
        if lat is None or lon is None:
            continue
        try:
            polygon.append(GeoPoint(float(lat), float(lon)))
        except (TypeError, ValueError):
            continue

    try:
        area = float(row.get("area") or 0.0)
    except (TypeError, ValueError) as exc:
        raise TerritoryDataError(f"Territory {territory_id} has an invalid area") from exc

    is_active = row.get("is_active")
    return ClaimedTerritory(
        territory_id=territory_id,
        owner_id=owner_id,
        polygon=tuple(polygon),
        area_m2=area,
        created_at=_parse_timestamp(row.get("created_at")),
        name=row.get("name"),
        is_active=True if is_active is None else bool(is_active),
    )


__all__ = [
    "BoundingBox",
    "TerritoryRecord",
    "build_territory_record",
    "polygon_to_ewkt",
    "territory_from_row",
    "to_polygon",
]
