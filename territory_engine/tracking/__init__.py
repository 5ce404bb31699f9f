"""Sample filtering, speed integrity and path recording."""

from .path_recorder import PathRecorder, PathSnapshot, RecorderConfig
from .sample_filter import DropReason, FilterDecision, SampleFilter, SampleFilterConfig
from .speed_monitor import (
    CLAIM_SPEED_POLICY,
    EXPLORATION_SPEED_POLICY,
    SpeedMonitor,
    SpeedPolicy,
    resolve_speed_mps,
)

__all__ = [
    "PathRecorder",
    "PathSnapshot",
    "RecorderConfig",
    "DropReason",
    "FilterDecision",
    "SampleFilter",
    "SampleFilterConfig",
    "CLAIM_SPEED_POLICY",
    "EXPLORATION_SPEED_POLICY",
    "SpeedMonitor",
    "SpeedPolicy",
    "resolve_speed_mps",
]
