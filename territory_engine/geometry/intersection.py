"""Self-intersection detection for a recorded path."""

from __future__ import annotations

from typing import Sequence, Tuple

from ..config import SELF_INTERSECTION_EXEMPT_SEGMENTS
from ..geo import segments_intersect
from ..models import GeoPoint


def has_path_self_intersection(
    points: Sequence[GeoPoint],
    exempt_segments: int = SELF_INTERSECTION_EXEMPT_SEGMENTS,
) -> bool:
    """Return True when two non-adjacent segments of the open path cross.

    Segment ``i`` joins ``points[i]`` and ``points[i + 1]``; pairs with
    ``j >= i + 2`` are compared. A pair is skipped when ``i`` lies among the
    first ``exempt_segments`` segments and ``j`` among the last
    ``exempt_segments``: a walked loop naturally approaches its own start
    while closing. The exemption also hides a genuine crossing confined to
    those windows (known false negative).
    """

    # Work on a private copy so a concurrently appended path cannot shift
    # indices mid-scan.
    snapshot: Tuple[GeoPoint, ...] = tuple(points)
    if len(snapshot) < 4:
        return False

    segment_count = len(snapshot) - 1
    window = max(exempt_segments, 0)
    for i in range(segment_count):
        a1, a2 = snapshot[i], snapshot[i + 1]
        for j in range(i + 2, segment_count):
            if i < window and j >= segment_count - window:
                continue
            if segments_intersect(a1, a2, snapshot[j], snapshot[j + 1]):
                return True
    return False


__all__ = ["has_path_self_intersection"]
