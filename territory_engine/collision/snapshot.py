"""Read-only territory snapshots and the cache that refreshes them."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import RLock
import time
from typing import Callable, Iterable, Optional, Tuple

from cachetools import TTLCache

from ..config import TERRITORY_CACHE_TTL_SECONDS
from ..errors import TerritoryStoreError
from ..models import ClaimedTerritory

TerritoryLoader = Callable[[], Iterable[ClaimedTerritory]]

_FRESH_KEY = "active"


@dataclass(frozen=True, slots=True)
class TerritorySnapshot:
    """Immutable set of active territories as of ``fetched_at``."""

    territories: Tuple[ClaimedTerritory, ...] = ()
    fetched_at: float = 0.0

    def __len__(self) -> int:
        return len(self.territories)

    def foreign(self, owner_id: Optional[str]) -> Tuple[ClaimedTerritory, ...]:
        """Territories not owned by ``owner_id`` (all of them for ``None``)."""

        return tuple(
            t for t in self.territories if t.is_active and t.owner_id != owner_id
        )


class TerritoryCache:
    """Holds the current snapshot and swaps in fresh ones atomically.

    Readers always get a complete snapshot object; a refresh builds the new
    snapshot first and replaces the reference under the lock. Freshness is
    tracked with a single-entry TTL cache. Sessions only read
    :meth:`snapshot`; the caller owns refresh timing and typically calls
    :meth:`refresh_if_stale` from its own loop.
    """

    def __init__(
        self,
        loader: Optional[TerritoryLoader] = None,
        ttl_seconds: float = TERRITORY_CACHE_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loader = loader
        self._timer = timer
        self._fresh: TTLCache[str, float] = TTLCache(
            maxsize=1, ttl=max(ttl_seconds, 0.001), timer=timer
        )
        self._lock = RLock()
        self._current = TerritorySnapshot()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def snapshot(self) -> TerritorySnapshot:
        with self._lock:
            return self._current

    @property
    def is_stale(self) -> bool:
        with self._lock:
            return _FRESH_KEY not in self._fresh

    def replace(self, territories: Iterable[ClaimedTerritory]) -> TerritorySnapshot:
        """Swap in an explicit territory collection (e.g. after an upload)."""

        snapshot = TerritorySnapshot(tuple(territories), self._timer())
        with self._lock:
            self._current = snapshot
            self._fresh[_FRESH_KEY] = snapshot.fetched_at
        self._log.debug("Territory snapshot replaced (%d territories)", len(snapshot))
        return snapshot

    def refresh(self) -> TerritorySnapshot:
        """Load territories from the loader and swap them in.

        Raises:
            TerritoryStoreError: When no loader is configured or loading fails.
        """

        if self._loader is None:
            raise TerritoryStoreError("TerritoryCache has no loader configured")
        territories = list(self._loader())
        snapshot = self.replace(territories)
        self._log.info("Loaded %d active territories", len(snapshot))
        return snapshot

    def refresh_if_stale(self) -> TerritorySnapshot:
        """Refresh when the TTL has expired; keep the stale snapshot on failure."""

        if not self.is_stale or self._loader is None:
            return self.snapshot()
        try:
            return self.refresh()
        except TerritoryStoreError as exc:
            self._log.warning(
                "Territory refresh failed, keeping %d cached territories: %s",
                len(self.snapshot()),
                exc,
            )
            return self.snapshot()


__all__ = ["TerritoryCache", "TerritoryLoader", "TerritorySnapshot"]
