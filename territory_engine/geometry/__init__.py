"""Territory geometry: self-intersection, spherical area and validation."""

from .area import spherical_polygon_area_m2
from .intersection import has_path_self_intersection
from .validation import ValidationRules, validate_territory

__all__ = [
    "spherical_polygon_area_m2",
    "has_path_self_intersection",
    "ValidationRules",
    "validate_territory",
]
