"""Recording sessions orchestrating the tracking and territory components."""

from .claim_session import ClaimSession
from .exploration_session import ExplorationSession
from .scheduler import SessionTicker
from .session import SessionSummary, SessionUpdate, TrackingSession

__all__ = [
    "ClaimSession",
    "ExplorationSession",
    "SessionTicker",
    "SessionSummary",
    "SessionUpdate",
    "TrackingSession",
]
