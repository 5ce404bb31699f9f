"""Movement integrity and territory geometry engine."""

from .collision import CollisionEngine, TerritoryCache, TerritorySnapshot
from .errors import (
    SessionStateError,
    TerritoryDataError,
    TerritoryEngineError,
    TerritoryStoreError,
)
from .geometry import (
    ValidationRules,
    has_path_self_intersection,
    spherical_polygon_area_m2,
    validate_territory,
)
from .models import (
    ClaimedTerritory,
    CollisionResult,
    GeoPoint,
    PathSample,
    SessionStatus,
    SpeedState,
    ValidationVerdict,
    WarningLevel,
)
from .services import ClaimSession, ExplorationSession, SessionTicker

__all__ = [
    "ClaimSession",
    "ClaimedTerritory",
    "CollisionEngine",
    "CollisionResult",
    "ExplorationSession",
    "GeoPoint",
    "PathSample",
    "SessionStateError",
    "SessionStatus",
    "SessionTicker",
    "SpeedState",
    "TerritoryCache",
    "TerritoryDataError",
    "TerritoryEngineError",
    "TerritorySnapshot",
    "TerritoryStoreError",
    "ValidationRules",
    "ValidationVerdict",
    "WarningLevel",
    "has_path_self_intersection",
    "spherical_polygon_area_m2",
    "validate_territory",
]
