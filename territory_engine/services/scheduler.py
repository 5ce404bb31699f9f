"""Background timer driving a session's fast cadence."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from ..config import SESSION_TICK_SECONDS


class Tickable(Protocol):
    @property
    def is_active(self) -> bool: ...

    def tick(self, now: Optional[float] = None) -> object: ...


class SessionTicker:
    """Calls ``session.tick(clock())`` every ``interval_s`` seconds.

    The thread exits on its own once the session is no longer active (e.g.
    after a forced termination); :meth:`stop` halts it synchronously.
    """

    def __init__(
        self,
        session: Tickable,
        interval_s: float = SESSION_TICK_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be greater than zero")
        self.session = session
        self.interval_s = interval_s
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="session-ticker", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout if timeout is not None else self.interval_s * 2)
        self._thread = None

    def __enter__(self) -> "SessionTicker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_s):
            if not self.session.is_active:
                self._log.debug("Session no longer active; ticker exiting")
                break
            try:
                self.session.tick(self._clock())
            except Exception as exc:  # pragma: no cover
                self._log.error("Session tick failed: %s", exc, exc_info=True)
                break


__all__ = ["SessionTicker", "Tickable"]
