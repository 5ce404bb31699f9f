"""Human-readable formatting helpers used in messages and log lines."""

from __future__ import annotations


def format_distance(distance_m: float) -> str:
    """Format metres as ``"850 m"`` or ``"1.2 km"``."""

    if distance_m >= 1000:
        return f"{distance_m / 1000:.1f} km"
    return f"{int(distance_m)} m"


def format_area(area_m2: float) -> str:
    """Format square metres, switching to km² from one million."""

    if area_m2 >= 1_000_000:
        return f"{area_m2 / 1_000_000:.2f} km²"
    return f"{area_m2:.0f} m²"


def format_speed(speed_mps: float) -> str:
    return f"{speed_mps * 3.6:.1f} km/h"


def format_duration(seconds: float) -> str:
    """Format seconds into a ``Xm Ys`` string (``Ys`` under a minute)."""

    mins, sec = divmod(int(seconds), 60)
    if mins:
        return f"{mins}m {sec}s"
    return f"{sec}s"
