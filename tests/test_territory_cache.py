"""Tests for territory snapshot caching and refresh behaviour."""

from __future__ import annotations

import pytest

from territory_engine.collision import TerritoryCache
from territory_engine.errors import TerritoryStoreError


def test_refresh_swaps_snapshot(make_territory, clock):
    calls = []

    def loader():
        calls.append(clock())
        return [make_territory("t-%d" % len(calls))]

    cache = TerritoryCache(loader, ttl_seconds=60, timer=clock)
    assert cache.is_stale
    assert len(cache.snapshot()) == 0

    first = cache.refresh()
    assert len(first) == 1
    assert cache.snapshot() is first
    assert not cache.is_stale

    clock.advance(30)
    assert cache.refresh_if_stale() is first
    assert len(calls) == 1

    clock.advance(31)
    assert cache.is_stale
    second = cache.refresh_if_stale()
    assert second is not first
    assert second.territories[0].territory_id == "t-2"
    assert len(calls) == 2


def test_old_snapshot_survives_a_refresh(make_territory, clock):
    cache = TerritoryCache(timer=clock)
    held = cache.replace([make_territory("a")])
    cache.replace([make_territory("b"), make_territory("c")])
    assert [t.territory_id for t in held.territories] == ["a"]
    assert len(cache.snapshot()) == 2


def test_failed_refresh_keeps_stale_snapshot(make_territory, clock):
    state = {"fail": False}

    def loader():
        if state["fail"]:
            raise TerritoryStoreError("store offline")
        return [make_territory()]

    cache = TerritoryCache(loader, ttl_seconds=10, timer=clock)
    original = cache.refresh()
    state["fail"] = True
    clock.advance(20)
    assert cache.refresh_if_stale() is original
    with pytest.raises(TerritoryStoreError):
        cache.refresh()


def test_refresh_without_loader_raises(clock):
    cache = TerritoryCache(timer=clock)
    with pytest.raises(TerritoryStoreError):
        cache.refresh()
    assert len(cache.refresh_if_stale()) == 0


def test_foreign_excludes_owner(make_territory):
    cache = TerritoryCache()
    snapshot = cache.replace([make_territory("a", owner_id="me"), make_territory("b")])
    assert [t.territory_id for t in snapshot.foreign("me")] == ["b"]
    assert len(snapshot.foreign(None)) == 2
