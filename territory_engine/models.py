"""Value types shared by the tracking, geometry and collision modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class PathSample:
    """A single location fix delivered by the location provider.

    Attributes:
        point: Reported position.
        timestamp_s: Capture time as epoch seconds.
        speed_mps: Instantaneous speed in metres/second, ``None`` (or a
            negative sentinel) when the provider does not know it.
        accuracy_m: Horizontal accuracy radius in metres, ``None`` (or a
            negative sentinel) when unknown.
    """

    point: GeoPoint
    timestamp_s: float
    speed_mps: Optional[float] = None
    accuracy_m: Optional[float] = None


class ClosureState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class SpeedStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    TERMINATED = "terminated"


@dataclass(frozen=True, slots=True)
class SpeedState:
    """Speed integrity state after the latest observation or tick.

    ``message`` carries the soft-band advisory while ``status`` is still
    ``NORMAL`` and the warning/termination text otherwise.
    """

    status: SpeedStatus = SpeedStatus.NORMAL
    seconds_remaining: int = 0
    speed_kmh: float = 0.0
    message: Optional[str] = None

    @property
    def is_terminated(self) -> bool:
        return self.status is SpeedStatus.TERMINATED


class RejectionReason(str, Enum):
    INSUFFICIENT_POINTS = "insufficient_points"
    INSUFFICIENT_DISTANCE = "insufficient_distance"
    SELF_INTERSECTING = "self_intersecting"
    INSUFFICIENT_AREA = "insufficient_area"


@dataclass(frozen=True, slots=True)
class ValidationVerdict:
    """Outcome of validating one closed loop.

    ``area_m2`` is 0 for rejections decided before the area step.
    """

    is_valid: bool
    area_m2: float
    point_count: int
    path_length_m: float
    reason: Optional[RejectionReason] = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class ClaimedTerritory:
    """Read-only view of a territory owned by some player."""

    territory_id: str
    owner_id: str
    polygon: Tuple[GeoPoint, ...]
    area_m2: float
    created_at: Optional[datetime] = None
    name: Optional[str] = None
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return self.name or "Unnamed territory"


class CollisionKind(str, Enum):
    POINT_INSIDE_FOREIGN_TERRITORY = "point_inside_foreign_territory"
    PATH_CROSSES_FOREIGN_BOUNDARY = "path_crosses_foreign_boundary"


class WarningLevel(IntEnum):
    """Proximity classification, ordered by severity."""

    SAFE = 0
    CAUTION = 1
    WARNING = 2
    DANGER = 3
    VIOLATION = 4


@dataclass(frozen=True, slots=True)
class CollisionResult:
    """Outcome of a start-point or path check against foreign territories."""

    has_collision: bool
    warning_level: WarningLevel
    kind: Optional[CollisionKind] = None
    message: Optional[str] = None
    distance_to_nearest_m: Optional[float] = None
    territory_id: Optional[str] = None

    @property
    def is_violation(self) -> bool:
        return self.warning_level is WarningLevel.VIOLATION


class SessionStatus(str, Enum):
    """Lifecycle of a recording session; values match the persisted status."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


__all__ = [
    "GeoPoint",
    "PathSample",
    "ClosureState",
    "SpeedStatus",
    "SpeedState",
    "RejectionReason",
    "ValidationVerdict",
    "ClaimedTerritory",
    "CollisionKind",
    "WarningLevel",
    "CollisionResult",
    "SessionStatus",
]
