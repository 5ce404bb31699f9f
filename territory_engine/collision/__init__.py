"""Territory collision engine and snapshot cache."""

from .engine import CollisionEngine, ProximityBands, nearest_vertex_distance_m
from .snapshot import TerritoryCache, TerritoryLoader, TerritorySnapshot

__all__ = [
    "CollisionEngine",
    "ProximityBands",
    "nearest_vertex_distance_m",
    "TerritoryCache",
    "TerritoryLoader",
    "TerritorySnapshot",
]
