"""Territory claiming session: record a loop, validate it, guard foreign land."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import time
from typing import Optional

from ..collision import CollisionEngine, TerritoryCache
from ..config import COLLISION_CHECK_INTERVAL_SECONDS
from ..errors import SessionStateError
from ..geometry import ValidationRules, validate_territory
from ..models import ClosureState, CollisionResult, GeoPoint, ValidationVerdict
from ..persistence.records import TerritoryRecord, build_territory_record
from ..tracking import (
    CLAIM_SPEED_POLICY,
    FilterDecision,
    PathRecorder,
    PathSnapshot,
    RecorderConfig,
    SampleFilterConfig,
    SpeedPolicy,
)
from .session import Clock, SessionSummary, SessionUpdate, TrackingSession, UpdateCallback


class ClaimSession(TrackingSession):
    """Walk a closed loop to claim it as territory.

    ``start`` refuses to begin inside a foreign territory. While recording,
    :meth:`tick` re-runs the path collision check every
    ``collision_interval_s`` seconds against the cached snapshot; the check
    also runs once when a closed loop passes validation. Any ``VIOLATION``
    fails the session.
    """

    def __init__(
        self,
        owner_id: str,
        territories: TerritoryCache,
        *,
        collision_engine: CollisionEngine | None = None,
        rules: ValidationRules | None = None,
        recorder_config: RecorderConfig | None = None,
        filter_config: SampleFilterConfig | None = None,
        speed_policy: SpeedPolicy = CLAIM_SPEED_POLICY,
        collision_interval_s: float = COLLISION_CHECK_INTERVAL_SECONDS,
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
        self.owner_id = owner_id
        self.territories = territories
        self.collision_engine = collision_engine or CollisionEngine(logger=self._log)
        self.rules = rules or ValidationRules()
        self.collision_interval_s = collision_interval_s
        self._recorder = PathRecorder(recorder_config, on_closed=self._on_closed)
        self._verdict: Optional[ValidationVerdict] = None
        self._closed_path: PathSnapshot = ()
        self._last_collision: Optional[CollisionResult] = None
        self._last_collision_check: float = 0.0

    # -- state ---------------------------------------------------------------
    @property
    def path(self) -> PathSnapshot:
        return self._recorder.snapshot()

    @property
    def closure_state(self) -> ClosureState:
        return self._recorder.closure_state

    @property
    def verdict(self) -> Optional[ValidationVerdict]:
        return self._verdict

    @property
    def last_collision(self) -> Optional[CollisionResult]:
        return self._last_collision

    @property
    def can_upload(self) -> bool:
        verdict = self._verdict
        return self.is_active and verdict is not None and verdict.is_valid

    # -- control -------------------------------------------------------------
    def start(self, start_point: GeoPoint, now: Optional[float] = None) -> CollisionResult:
        """Begin claiming at ``start_point`` unless it lies in foreign territory.

        Raises:
            SessionStateError: If a session is already in progress.
        """

        with self._lock:
            if self.is_active:
                raise SessionStateError("A claim session is already in progress")
            result = self.collision_engine.check_start_point(
                start_point, self.territories.snapshot(), self.owner_id
            )
            self._last_collision = result
            if result.is_violation:
                self._log.warning("Claim blocked at start: %s", result.message)
                return result
            started = self._begin(now)
            self._last_collision_check = started
        return result

    def check_collisions(self, now: Optional[float] = None) -> CollisionResult:
        """Run the path collision check immediately."""

        with self._lock:
            result = self._check_collisions_locked(self._clock() if now is None else now)
        return result

    def build_upload_record(
        self, completed_at: Optional[datetime] = None
    ) -> TerritoryRecord:
        """Return the persistence record for the validated loop.

        Raises:
            SessionStateError: Unless the session is active with a valid verdict.
        """

        with self._lock:
            if not self.can_upload or self._started_at is None:
                raise SessionStateError("No validated territory is available for upload")
            verdict = self._verdict
            assert verdict is not None
            return build_territory_record(
                owner_id=self.owner_id,
                points=self._closed_path,
                area_m2=verdict.area_m2,
                started_at=datetime.fromtimestamp(self._started_at, tz=timezone.utc),
                completed_at=completed_at,
            )

    # -- pipeline ------------------------------------------------------------
    def _record(self, decision: FilterDecision) -> SessionUpdate:
        closed = self._recorder.append(decision.sample.point)
        verdict = self._verdict if closed else None
        collision = None
        if verdict is not None and verdict.is_valid:
            collision = self._check_collisions_locked(decision.sample.timestamp_s)
        return self._update(
            decision=decision,
            recorded=True,
            closed=closed,
            verdict=verdict,
            collision=collision,
        )

    def _tick_locked(self, now: float) -> SessionUpdate:
        update = super()._tick_locked(now)
        if not self.is_active:
            return update
        if now - self._last_collision_check < self.collision_interval_s:
            return update
        collision = self._check_collisions_locked(now)
        return self._update(collision=collision)

    def _check_collisions_locked(self, now: float) -> CollisionResult:
        self._last_collision_check = now
        result = self.collision_engine.check_path(
            self._recorder.snapshot(), self.territories.snapshot(), self.owner_id
        )
        self._last_collision = result
        if result.is_violation and self.is_active:
            self._fail(result.message or "Path entered a foreign territory", now)
        return result

    def _on_closed(self, snapshot: PathSnapshot) -> None:
        self._closed_path = snapshot
        self._verdict = validate_territory(snapshot, self.rules)

    def _reset_path(self) -> None:
        self._recorder.reset()
        self._verdict = None
        self._closed_path = ()

    def _summarise(self, ended_at: float) -> SessionSummary:
        return SessionSummary(
            status=self._status,
            started_at=self._started_at,
            ended_at=ended_at,
            point_count=len(self._recorder),
            distance_m=self._recorder.length_m,
            path=self._recorder.snapshot(),
            verdict=self._verdict,
            failure_reason=self._failure_reason,
        )


__all__ = ["ClaimSession"]
