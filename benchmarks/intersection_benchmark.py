"""Benchmark territory validation (self-intersection + area) on long loops."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from territory_engine.geometry import (  # noqa: E402
    has_path_self_intersection,
    spherical_polygon_area_m2,
)
from territory_engine.models import GeoPoint  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one validation pass."""

    intersection: float
    area: float

    @property
    def total(self) -> float:
        return self.intersection + self.area


@dataclass(slots=True)
class BenchmarkSummary:
    point_count: int
    iterations: int
    mean_intersection_ms: float
    mean_area_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_loop(point_count: int, radius_m: float = 500.0) -> List[GeoPoint]:
    """Generate a simple circular loop; the worst case for the pair scan."""

    base_lat, base_lon = 37.0, -122.0
    deg_per_m = 1.0 / 111_194.9
    lon_scale = math.cos(math.radians(base_lat))
    points = []
    for idx in range(point_count):
        theta = 2.0 * math.pi * idx / point_count
        points.append(
            GeoPoint(
                base_lat + radius_m * math.sin(theta) * deg_per_m,
                base_lon + radius_m * math.cos(theta) * deg_per_m / lon_scale,
            )
        )
    return points


def _run_iteration(points: List[GeoPoint]) -> StageDurations:
    start = time.perf_counter()
    crossed = has_path_self_intersection(points)
    intersection = time.perf_counter() - start
    if crossed:
        raise RuntimeError("Synthetic loop unexpectedly self-intersects")

    start = time.perf_counter()
    _ = spherical_polygon_area_m2(points)
    area = time.perf_counter() - start
    return StageDurations(intersection=intersection, area=area)


def run_benchmark(point_count: int, iterations: int) -> BenchmarkSummary:
    """Benchmark validation stages and return aggregated timings."""

    if point_count < 10:
        raise ValueError("point_count must be at least 10")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    points = _build_loop(point_count)
    durations = [_run_iteration(points) for _ in range(iterations)]
    return BenchmarkSummary(
        point_count=point_count,
        iterations=iterations,
        mean_intersection_ms=statistics.fmean(d.intersection for d in durations) * 1000.0,
        mean_area_ms=statistics.fmean(d.area for d in durations) * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=max(d.total for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "point_count": summary.point_count,
        "iterations": summary.iterations,
        "mean_intersection_ms": summary.mean_intersection_ms,
        "mean_area_ms": summary.mean_area_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark territory validation with long recorded loops",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=1000,
        help="Number of points in the synthetic loop",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    formatted = _format_summary(run_benchmark(args.points, args.iterations))
    for key, value in formatted.items():
        if key in {"point_count", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
