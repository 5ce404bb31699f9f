"""Tests for the background ticker that drives session countdowns."""

from __future__ import annotations

import threading

import pytest

from territory_engine.models import PathSample, SessionStatus
from territory_engine.services import ExplorationSession, SessionTicker


class RecordingSession:
    """Stand-in session that records tick timestamps."""

    def __init__(self, ticks_before_stop=None):
        self.ticks = []
        self.active = True
        self.ticked = threading.Event()
        self._limit = ticks_before_stop

    @property
    def is_active(self):
        return self.active

    def tick(self, now=None):
        self.ticks.append(now)
        self.ticked.set()
        if self._limit is not None and len(self.ticks) >= self._limit:
            self.active = False


def test_ticker_calls_tick_until_stopped():
    session = RecordingSession()
    ticker = SessionTicker(session, interval_s=0.01, clock=lambda: 42.0)
    ticker.start()
    assert session.ticked.wait(1.0), "ticker never fired"
    ticker.stop(timeout=1.0)
    assert not ticker.running
    assert session.ticks and all(t == 42.0 for t in session.ticks)


def test_ticker_exits_when_session_ends():
    session = RecordingSession(ticks_before_stop=2)
    ticker = SessionTicker(session, interval_s=0.01)
    ticker.start()
    thread = ticker._thread
    thread.join(timeout=1.0)
    assert not thread.is_alive()
    assert len(session.ticks) == 2


def test_ticker_context_manager_stops_thread():
    session = RecordingSession()
    with SessionTicker(session, interval_s=0.01) as ticker:
        assert session.ticked.wait(1.0)
        assert ticker.running
    assert not ticker.running


def test_invalid_interval_rejected():
    with pytest.raises(ValueError):
        SessionTicker(RecordingSession(), interval_s=0)


def test_ticker_drives_exploration_countdown(at):
    now = {"t": 0.0}
    session = ExplorationSession(clock=lambda: now["t"])
    session.start(at(0, 0), now=0.0)
    session.offer(PathSample(at(0, 200), 5.0))  # 40 m/s, countdown starts
    now["t"] = 100.0

    done = threading.Event()
    session.on_update = lambda update: done.set() if update.status is SessionStatus.FAILED else None
    with SessionTicker(session, interval_s=0.01, clock=lambda: now["t"]):
        assert done.wait(1.0), "countdown never expired"
    assert session.status is SessionStatus.FAILED
