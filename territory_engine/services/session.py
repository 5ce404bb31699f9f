"""Shared lifecycle for claim and exploration recording sessions.

A session owns its filter, speed monitor and path state exclusively. Sample
callbacks and timer ticks may arrive on different threads, so every mutation
happens under one re-entrant lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from threading import RLock
import time
from typing import Callable, Optional, Tuple

from ..errors import SessionStateError
from ..models import (
    CollisionResult,
    GeoPoint,
    PathSample,
    SessionStatus,
    SpeedState,
    SpeedStatus,
    ValidationVerdict,
)
from ..tracking import (
    FilterDecision,
    SampleFilter,
    SampleFilterConfig,
    SpeedMonitor,
    SpeedPolicy,
    resolve_speed_mps,
)

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class SessionUpdate:
    """What changed after one sample or timer tick."""

    status: SessionStatus
    speed: SpeedState
    decision: Optional[FilterDecision] = None
    recorded: bool = False
    closed: bool = False
    verdict: Optional[ValidationVerdict] = None
    collision: Optional[CollisionResult] = None
    failure_reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Final state of a session captured before its state is discarded."""

    status: SessionStatus
    started_at: Optional[float]
    ended_at: float
    point_count: int
    distance_m: float
    path: Tuple[GeoPoint, ...] = field(default_factory=tuple)
    verdict: Optional[ValidationVerdict] = None
    failure_reason: Optional[str] = None

    @property
    def duration_s(self) -> float:
        if self.started_at is None:
            return 0.0
        return max(self.ended_at - self.started_at, 0.0)


UpdateCallback = Callable[[SessionUpdate], None]


class TrackingSession:
    """Base class wiring filter -> speed monitor -> subclass recording hook."""

    def __init__(
        self,
        speed_policy: SpeedPolicy,
        *,
        filter_config: SampleFilterConfig | None = None,
        on_update: Optional[UpdateCallback] = None,
        clock: Clock = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._lock = RLock()
        self._clock = clock
        self._filter = SampleFilter(filter_config)
        self._speed = SpeedMonitor(speed_policy, logger=self._log)
        self._status = SessionStatus.IDLE
        self._started_at: Optional[float] = None
        self._failure_reason: Optional[str] = None
        # Set while warned samples were skipped since the last recorded point.
        self._speeding_gap = False
        self._last_summary: Optional[SessionSummary] = None
        self.on_update = on_update

    # -- state ---------------------------------------------------------------
    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is SessionStatus.IN_PROGRESS

    @property
    def speed_state(self) -> SpeedState:
        return self._speed.state

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def last_summary(self) -> Optional[SessionSummary]:
        """Summary of the most recently ended session, if any."""

        return self._last_summary

    # -- control -------------------------------------------------------------
    def offer(self, sample: PathSample) -> SessionUpdate:
        """Feed one raw location sample through the session pipeline."""

        with self._lock:
            update = self._offer_locked(sample)
        self._emit(update)
        return update

    def tick(self, now: Optional[float] = None) -> SessionUpdate:
        """Timer callback: advance the speed countdown and periodic checks."""

        with self._lock:
            update = self._tick_locked(self._clock() if now is None else now)
        self._emit(update)
        return update

    def stop(self, now: Optional[float] = None) -> SessionSummary:
        """End the session normally and discard its in-memory state.

        Raises:
            SessionStateError: If no session is in progress.
        """

        with self._lock:
            if not self.is_active:
                raise SessionStateError(f"No session in progress (status={self._status.value})")
            summary = self._finish(SessionStatus.COMPLETED, now)
        self._log.info("Session completed after %.0fs", summary.duration_s)
        return summary

    def cancel(self, now: Optional[float] = None) -> Optional[SessionSummary]:
        """Abort the session; a no-op returning ``None`` when nothing is running."""

        with self._lock:
            if not self.is_active:
                return None
            summary = self._finish(SessionStatus.CANCELLED, now)
        self._log.info("Session cancelled")
        return summary

    # -- pipeline ------------------------------------------------------------
    def _offer_locked(self, sample: PathSample) -> SessionUpdate:
        if not self.is_active:
            self._log.debug("Ignoring sample while session is %s", self._status.value)
            return self._update()

        decision = self._filter.offer(sample)
        if not decision.accepted:
            return self._update(decision=decision)

        speed = self._speed.observe(resolve_speed_mps(decision), sample.timestamp_s)
        if speed.is_terminated:
            self._fail(speed.message or "Speed limit exceeded", sample.timestamp_s)
            return self._update(decision=decision)
        if speed.status is SpeedStatus.WARNING:
            # Points recorded while speeding would corrupt the path.
            self._speeding_gap = True
            return self._update(decision=decision)
        update = self._record(decision)
        self._speeding_gap = False
        return update

    def _tick_locked(self, now: float) -> SessionUpdate:
        if not self.is_active:
            return self._update()
        speed = self._speed.tick(now)
        if speed.is_terminated:
            self._fail(speed.message or "Speed limit exceeded", now)
        return self._update()

    def _begin(self, now: Optional[float]) -> float:
        started = self._clock() if now is None else now
        self._filter.reset()
        self._speed.reset()
        self._reset_path()
        self._failure_reason = None
        self._speeding_gap = False
        self._started_at = started
        self._status = SessionStatus.IN_PROGRESS
        self._log.info("Session started (policy=%s)", self._speed.policy.name)
        return started

    def _fail(self, reason: str, now: Optional[float] = None) -> SessionSummary:
        self._failure_reason = reason
        summary = self._finish(SessionStatus.FAILED, now)
        self._log.error("Session failed: %s", reason)
        return summary

    def _finish(self, status: SessionStatus, now: Optional[float]) -> SessionSummary:
        ended = self._clock() if now is None else now
        self._status = status
        summary = self._summarise(ended)
        self._last_summary = summary
        self._filter.reset()
        self._reset_path()
        self._started_at = None
        return summary

    def _update(self, **fields: object) -> SessionUpdate:
        fields.setdefault("failure_reason", self._failure_reason)
        return SessionUpdate(status=self._status, speed=self._speed.state, **fields)

    def _emit(self, update: SessionUpdate) -> None:
        if self.on_update is not None:
            self.on_update(update)

    # -- subclass hooks ------------------------------------------------------
    def _record(self, decision: FilterDecision) -> SessionUpdate:
        raise NotImplementedError

    def _reset_path(self) -> None:
        raise NotImplementedError

    def _summarise(self, ended_at: float) -> SessionSummary:
        raise NotImplementedError


__all__ = [
    "Clock",
    "SessionSummary",
    "SessionUpdate",
    "TrackingSession",
    "UpdateCallback",
]
