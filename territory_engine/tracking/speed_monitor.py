"""Speed integrity state machine shared by claiming and exploration.

One :class:`SpeedMonitor` implementation serves both flows; the behavioural
difference between them lives entirely in the :class:`SpeedPolicy` it is
built with. A policy whose ``grace_seconds`` is 0 terminates on the first
hard breach, otherwise a countdown runs and is cancelled when the speed
drops back under the hard threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from ..config import (
    CLAIM_HARD_SPEED_KMH,
    CLAIM_SOFT_SPEED_KMH,
    CLAIM_SPEED_GRACE_SECONDS,
    EXPLORATION_HARD_SPEED_KMH,
    EXPLORATION_SPEED_GRACE_SECONDS,
)
from ..models import SpeedState, SpeedStatus
from .sample_filter import FilterDecision

_MPS_TO_KMH = 3.6


@dataclass(frozen=True, slots=True)
class SpeedPolicy:
    """Thresholds for one speed integrity flow."""

    name: str
    hard_kmh: float
    grace_seconds: int = 0
    soft_kmh: Optional[float] = None

    @property
    def hard_mps(self) -> float:
        return self.hard_kmh / _MPS_TO_KMH

    @property
    def terminates_immediately(self) -> bool:
        return self.grace_seconds <= 0


CLAIM_SPEED_POLICY = SpeedPolicy(
    name="claim",
    hard_kmh=CLAIM_HARD_SPEED_KMH,
    grace_seconds=CLAIM_SPEED_GRACE_SECONDS,
    soft_kmh=CLAIM_SOFT_SPEED_KMH,
)

EXPLORATION_SPEED_POLICY = SpeedPolicy(
    name="exploration",
    hard_kmh=EXPLORATION_HARD_SPEED_KMH,
    grace_seconds=EXPLORATION_SPEED_GRACE_SECONDS,
)


def resolve_speed_mps(decision: FilterDecision) -> float:
    """Return the provider speed when known, else distance over elapsed time."""

    reported = decision.sample.speed_mps
    if reported is not None and reported >= 0:
        return float(reported)
    if decision.elapsed_s <= 0:
        return 0.0
    return decision.distance_m / decision.elapsed_s


class SpeedMonitor:
    """Classifies speeds and drives Normal -> Warning -> Terminated."""

    def __init__(
        self, policy: SpeedPolicy, logger: logging.Logger | None = None
    ) -> None:
        self.policy = policy
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._state = SpeedState()
        self._warning_started_at: Optional[float] = None

    @property
    def state(self) -> SpeedState:
        return self._state

    def reset(self) -> None:
        self._state = SpeedState()
        self._warning_started_at = None

    def observe(self, speed_mps: float, timestamp_s: float) -> SpeedState:
        """Classify one accepted sample's speed."""

        if self._state.is_terminated:
            return self._state
        self._advance(timestamp_s)
        if self._state.is_terminated:
            return self._state

        speed_kmh = max(speed_mps, 0.0) * _MPS_TO_KMH
        policy = self.policy
        if speed_kmh > policy.hard_kmh:
            if policy.terminates_immediately:
                self._terminate(speed_kmh)
            elif self._state.status is SpeedStatus.WARNING:
                self._state = self._warning_state(speed_kmh, self._state.seconds_remaining)
                self._log.warning(
                    "[%s] still speeding: %.1f km/h, %ds remaining",
                    policy.name,
                    speed_kmh,
                    self._state.seconds_remaining,
                )
            else:
                self._warning_started_at = timestamp_s
                self._state = self._warning_state(speed_kmh, policy.grace_seconds)
                self._log.warning(
                    "[%s] speed %.1f km/h exceeds %.0f km/h; %ds countdown started",
                    policy.name,
                    speed_kmh,
                    policy.hard_kmh,
                    policy.grace_seconds,
                )
            return self._state

        if self._state.status is SpeedStatus.WARNING:
            self._log.info(
                "[%s] speed back to %.1f km/h, warning cancelled", policy.name, speed_kmh
            )
        self._warning_started_at = None
        advisory = None
        if policy.soft_kmh is not None and speed_kmh > policy.soft_kmh:
            advisory = (
                f"Slow down: {speed_kmh:.1f} km/h is above the "
                f"{policy.soft_kmh:.0f} km/h walking limit"
            )
        self._state = SpeedState(SpeedStatus.NORMAL, speed_kmh=speed_kmh, message=advisory)
        return self._state

    def tick(self, now_s: float) -> SpeedState:
        """Advance a running countdown from a timer callback."""

        if not self._state.is_terminated:
            self._advance(now_s)
        return self._state

    def _advance(self, now_s: float) -> None:
        if self._state.status is not SpeedStatus.WARNING or self._warning_started_at is None:
            return
        elapsed = max(now_s - self._warning_started_at, 0.0)
        remaining = self.policy.grace_seconds - int(elapsed)
        if remaining <= 0:
            self._terminate(self._state.speed_kmh)
        elif remaining != self._state.seconds_remaining:
            self._state = self._warning_state(self._state.speed_kmh, remaining)

    def _warning_state(self, speed_kmh: float, remaining: int) -> SpeedState:
        message = (
            f"Moving too fast ({speed_kmh:.1f} km/h, limit "
            f"{self.policy.hard_kmh:.0f} km/h); stopping in {remaining}s"
        )
        return SpeedState(SpeedStatus.WARNING, remaining, speed_kmh, message)

    def _terminate(self, speed_kmh: float) -> None:
        self._warning_started_at = None
        self._state = SpeedState(
            SpeedStatus.TERMINATED,
            0,
            speed_kmh,
            f"Session stopped: speed exceeded the {self.policy.hard_kmh:.0f} km/h limit",
        )
        self._log.error(
            "[%s] speed integrity violated at %.1f km/h; terminating",
            self.policy.name,
            speed_kmh,
        )


__all__ = [
    "CLAIM_SPEED_POLICY",
    "EXPLORATION_SPEED_POLICY",
    "SpeedMonitor",
    "SpeedPolicy",
    "resolve_speed_mps",
]
