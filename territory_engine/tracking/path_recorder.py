"""Append-only path recording with loop-closure detection."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, List, Optional, Tuple

from ..config import CLOSURE_DISTANCE_M, CLOSURE_MIN_POINTS
from ..geo import distance_m
from ..models import ClosureState, GeoPoint

PathSnapshot = Tuple[GeoPoint, ...]
ClosureCallback = Callable[[PathSnapshot], None]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RecorderConfig:
    min_points: int = CLOSURE_MIN_POINTS
    closure_distance_m: float = CLOSURE_DISTANCE_M


class PathRecorder:
    """Owns the tracked path of one recording session.

    ``on_closed`` fires exactly once per session, with an immutable snapshot
    of the path taken at the moment of closure.
    """

    def __init__(
        self,
        config: RecorderConfig | None = None,
        on_closed: Optional[ClosureCallback] = None,
    ) -> None:
        self.config = config or RecorderConfig()
        self.on_closed = on_closed
        self._points: List[GeoPoint] = []
        self._length_m = 0.0
        self._closure = ClosureState.OPEN

    @property
    def closure_state(self) -> ClosureState:
        return self._closure

    @property
    def is_closed(self) -> bool:
        return self._closure is ClosureState.CLOSED

    @property
    def length_m(self) -> float:
        """Cumulative great-circle length between consecutive points."""

        return self._length_m

    def __len__(self) -> int:
        return len(self._points)

    def snapshot(self) -> PathSnapshot:
        return tuple(self._points)

    def append(self, point: GeoPoint) -> bool:
        """Append a filtered point; return True when this append closed the loop."""

        if self._points:
            self._length_m += distance_m(self._points[-1], point)
        self._points.append(point)

        if self.is_closed or len(self._points) < self.config.min_points:
            return False
        gap = distance_m(self._points[0], point)
        if gap > self.config.closure_distance_m:
            return False

        self._closure = ClosureState.CLOSED
        LOGGER.info(
            "Loop closed after %d points (%.1fm from start, length %.1fm)",
            len(self._points),
            gap,
            self._length_m,
        )
        if self.on_closed is not None:
            self.on_closed(self.snapshot())
        return True

    def reset(self) -> None:
        self._points = []
        self._length_m = 0.0
        self._closure = ClosureState.OPEN


__all__ = ["ClosureCallback", "PathRecorder", "PathSnapshot", "RecorderConfig"]
