"""Exploration session: distance tracking under the speed integrity rules."""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple

from ..errors import SessionStateError
from ..formatting import format_distance
from ..geo import distance_m
from ..models import GeoPoint, PathSample
from ..tracking import (
    EXPLORATION_SPEED_POLICY,
    FilterDecision,
    SampleFilterConfig,
    SpeedPolicy,
)
from .session import Clock, SessionSummary, SessionUpdate, TrackingSession, UpdateCallback


class ExplorationSession(TrackingSession):
    """Accumulates walked distance; speeding past the grace period fails it."""

    def __init__(
        self,
        *,
        filter_config: SampleFilterConfig | None = None,
        speed_policy: SpeedPolicy = EXPLORATION_SPEED_POLICY,
        on_update: Optional[UpdateCallback] = None,
        clock: Clock = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            speed_policy,
            filter_config=filter_config,
            on_update=on_update,
            clock=clock,
            logger=logger,
        )
        self._path: List[GeoPoint] = []
        self._distance_m = 0.0

    @property
    def distance_m(self) -> float:
        return self._distance_m

    @property
    def path(self) -> Tuple[GeoPoint, ...]:
        return tuple(self._path)

    def duration_s(self, now: Optional[float] = None) -> float:
        if self._started_at is None:
            return 0.0
        current = self._clock() if now is None else now
        return max(current - self._started_at, 0.0)

    def start(
        self, start_point: Optional[GeoPoint] = None, now: Optional[float] = None
    ) -> None:
        """Begin exploring, optionally seeding the path with the current position.

        Raises:
            SessionStateError: If a session is already in progress.
        """

        with self._lock:
            if self.is_active:
                raise SessionStateError("An exploration session is already in progress")
            started = self._begin(now)
            if start_point is not None:
                self._offer_locked(PathSample(start_point, started))

    def _record(self, decision: FilterDecision) -> SessionUpdate:
        point = decision.sample.point
        if self._path and self._speeding_gap:
            # Re-anchor after a speeding spell; the leg spanning it earns nothing.
            self._log.info(
                "Re-anchored after speeding; %.1fm gap leg not credited",
                distance_m(self._path[-1], point),
            )
        elif self._path:
            step = distance_m(self._path[-1], point)
            self._distance_m += step
            self._log.debug(
                "Distance +%.1fm, total %s", step, format_distance(self._distance_m)
            )
        self._path.append(point)
        return self._update(decision=decision, recorded=True)

    def _reset_path(self) -> None:
        self._path = []
        self._distance_m = 0.0

    def _summarise(self, ended_at: float) -> SessionSummary:
        return SessionSummary(
            status=self._status,
            started_at=self._started_at,
            ended_at=ended_at,
            point_count=len(self._path),
            distance_m=self._distance_m,
            path=tuple(self._path),
            failure_reason=self._failure_reason,
        )


__all__ = ["ExplorationSession"]
