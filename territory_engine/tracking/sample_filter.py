"""Noise filter applied to raw location samples before they reach a session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional

from ..config import (
    SAMPLE_ACCURACY_THRESHOLD_M,
    SAMPLE_MIN_MOVEMENT_M,
    SAMPLE_REJECT_UNKNOWN_ACCURACY,
)
from ..geo import distance_m
from ..models import PathSample

LOGGER = logging.getLogger(__name__)


class DropReason(str, Enum):
    POOR_ACCURACY = "poor_accuracy"
    UNKNOWN_ACCURACY = "unknown_accuracy"
    INSUFFICIENT_MOVEMENT = "insufficient_movement"


@dataclass(slots=True)
class SampleFilterConfig:
    """Thresholds controlling which samples are trusted."""

    accuracy_threshold_m: float = SAMPLE_ACCURACY_THRESHOLD_M
    min_movement_m: float = SAMPLE_MIN_MOVEMENT_M
    reject_unknown_accuracy: bool = SAMPLE_REJECT_UNKNOWN_ACCURACY


@dataclass(frozen=True, slots=True)
class FilterDecision:
    """Verdict for one sample.

    For accepted samples ``distance_m`` and ``elapsed_s`` are measured from the
    previously accepted sample (both 0 for the origin).
    """

    sample: PathSample
    accepted: bool
    is_origin: bool = False
    distance_m: float = 0.0
    elapsed_s: float = 0.0
    drop_reason: Optional[DropReason] = None


class SampleFilter:
    """Drops inaccurate fixes and stationary jitter.

    The first sample after construction or :meth:`reset` is always accepted
    as the origin of the path.
    """

    def __init__(self, config: SampleFilterConfig | None = None) -> None:
        self.config = config or SampleFilterConfig()
        self._last_accepted: Optional[PathSample] = None

    @property
    def last_accepted(self) -> Optional[PathSample]:
        return self._last_accepted

    def reset(self) -> None:
        self._last_accepted = None

    def offer(self, sample: PathSample) -> FilterDecision:
        """Evaluate ``sample`` and advance the anchor when it is accepted."""

        accuracy = sample.accuracy_m
        if accuracy is None or accuracy < 0:
            if self.config.reject_unknown_accuracy:
                return self._drop(sample, DropReason.UNKNOWN_ACCURACY)
        elif accuracy > self.config.accuracy_threshold_m:
            return self._drop(sample, DropReason.POOR_ACCURACY)

        previous = self._last_accepted
        if previous is None:
            self._last_accepted = sample
            LOGGER.debug(
                "Origin accepted at (%.6f, %.6f)", sample.point.lat, sample.point.lon
            )
            return FilterDecision(sample, accepted=True, is_origin=True)

        moved = distance_m(previous.point, sample.point)
        if moved < self.config.min_movement_m:
            return self._drop(sample, DropReason.INSUFFICIENT_MOVEMENT, moved)

        self._last_accepted = sample
        elapsed = sample.timestamp_s - previous.timestamp_s
        return FilterDecision(sample, accepted=True, distance_m=moved, elapsed_s=elapsed)

    def _drop(
        self, sample: PathSample, reason: DropReason, moved: float = 0.0
    ) -> FilterDecision:
        LOGGER.debug(
            "Dropped sample at t=%.1f (%s, accuracy=%s, moved=%.1fm)",
            sample.timestamp_s,
            reason.value,
            sample.accuracy_m,
            moved,
        )
        return FilterDecision(sample, accepted=False, distance_m=moved, drop_reason=reason)


__all__ = ["DropReason", "FilterDecision", "SampleFilter", "SampleFilterConfig"]
