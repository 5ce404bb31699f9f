"""Territory validation pipeline run once per loop closure."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from ..config import (
    SELF_INTERSECTION_EXEMPT_SEGMENTS,
    TERRITORY_MIN_AREA_M2,
    TERRITORY_MIN_DISTANCE_M,
    TERRITORY_MIN_POINTS,
)
from ..formatting import format_area, format_distance
from ..geo import path_length_m
from ..models import GeoPoint, RejectionReason, ValidationVerdict
from .area import spherical_polygon_area_m2
from .intersection import has_path_self_intersection

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ValidationRules:
    """Minimums a closed loop has to meet to become a territory."""

    min_points: int = TERRITORY_MIN_POINTS
    min_distance_m: float = TERRITORY_MIN_DISTANCE_M
    min_area_m2: float = TERRITORY_MIN_AREA_M2
    exempt_segments: int = SELF_INTERSECTION_EXEMPT_SEGMENTS


def validate_territory(
    points: Sequence[GeoPoint], rules: ValidationRules | None = None
) -> ValidationVerdict:
    """Run the point-count, distance, self-intersection and area checks in order.

    The first failing check decides the verdict. Nothing is persisted; the
    verdict only informs the caller.
    """

    rules = rules or ValidationRules()
    snapshot = tuple(points)
    count = len(snapshot)

    if count < rules.min_points:
        return _reject(
            RejectionReason.INSUFFICIENT_POINTS,
            f"Not enough points: {count} recorded, {rules.min_points} required",
            count,
            0.0,
        )

    length = path_length_m(snapshot)
    if length < rules.min_distance_m:
        return _reject(
            RejectionReason.INSUFFICIENT_DISTANCE,
            f"Path too short: {format_distance(length)} walked, "
            f"{format_distance(rules.min_distance_m)} required",
            count,
            length,
        )

    if has_path_self_intersection(snapshot, rules.exempt_segments):
        return _reject(
            RejectionReason.SELF_INTERSECTING,
            "Path crosses itself; walk a simple loop without figure-eights",
            count,
            length,
        )

    area = spherical_polygon_area_m2(snapshot)
    if area < rules.min_area_m2:
        return _reject(
            RejectionReason.INSUFFICIENT_AREA,
            f"Territory too small: {format_area(area)}, "
            f"{format_area(rules.min_area_m2)} required",
            count,
            length,
            area,
        )

    LOGGER.info(
        "Territory valid: %s over %d points (%s walked)",
        format_area(area),
        count,
        format_distance(length),
    )
    return ValidationVerdict(
        is_valid=True,
        area_m2=area,
        point_count=count,
        path_length_m=length,
        message=f"Territory valid: {format_area(area)}",
    )


def _reject(
    reason: RejectionReason,
    message: str,
    count: int,
    length: float,
    area: float = 0.0,
) -> ValidationVerdict:
    LOGGER.info("Territory rejected (%s): %s", reason.value, message)
    return ValidationVerdict(
        is_valid=False,
        area_m2=area,
        point_count=count,
        path_length_m=length,
        reason=reason,
        message=message,
    )


__all__ = ["ValidationRules", "validate_territory"]
