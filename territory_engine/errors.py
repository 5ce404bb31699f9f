"""Central error types used across the territory engine.

Rejected samples, speed violations, failed validations and collisions are
returned as values. These exceptions cover misuse of the session API and
failures of the persistence collaborator.
"""

from __future__ import annotations


class TerritoryEngineError(RuntimeError):
    """Base error for the territory engine."""


class SessionStateError(TerritoryEngineError):
    """Raised when a session control call does not fit the current state."""


class TerritoryStoreError(TerritoryEngineError):
    """Raised when the persistence collaborator cannot be reached or fails."""


class TerritoryDataError(TerritoryEngineError):
    """Raised when a stored territory row cannot be parsed."""


__all__ = [
    "TerritoryEngineError",
    "SessionStateError",
    "TerritoryStoreError",
    "TerritoryDataError",
]
