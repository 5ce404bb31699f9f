"""Territory persistence: record shape and REST client."""

from .client import TerritoryClient, create_session
from .records import (
    TerritoryRecord,
    build_territory_record,
    polygon_to_ewkt,
    territory_from_row,
)

__all__ = [
    "TerritoryClient",
    "TerritoryRecord",
    "build_territory_record",
    "create_session",
    "polygon_to_ewkt",
    "territory_from_row",
]
