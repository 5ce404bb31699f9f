"""Tests for the territory store client using a fake HTTP session."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
import requests

from territory_engine.errors import TerritoryStoreError
from territory_engine.persistence import TerritoryClient, build_territory_record


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, headers=None):
        self.status_code = status_code
        self._data = data if data is not None else []
        self.headers = headers or {}

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data

    @property
    def text(self):
        return json.dumps(self._data)

    def raise_for_status(self):
        if 400 <= self.status_code:
            raise requests.exceptions.HTTPError(response=self)


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _row(territory_id, owner="rival"):
    return {
        "id": territory_id,
        "user_id": owner,
        "path": [
            {"lat": 31.0, "lon": 121.0},
            {"lat": 31.001, "lon": 121.0},
            {"lat": 31.001, "lon": 121.001},
        ],
        "area": 1000.0,
        "is_active": True,
    }


def _client(session):
    return TerritoryClient("https://store.example/rest/v1/", "secret", session=session)


def test_load_active_territories_skips_bad_rows():
    session = FakeSession([FakeResp(data=[_row("a"), {"id": "broken"}, _row("b")])])
    territories = _client(session).load_active_territories()

    assert [t.territory_id for t in territories] == ["a", "b"]
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "https://store.example/rest/v1/territories"
    assert kwargs["params"] == {"select": "*", "is_active": "eq.true"}
    assert kwargs["headers"]["apikey"] == "secret"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"


def test_upload_posts_payload(rival_square):
    session = FakeSession([FakeResp(status_code=201)])
    record = build_territory_record(
        "me",
        list(rival_square.polygon),
        10_000.0,
        datetime(2025, 5, 1, tzinfo=timezone.utc),
    )
    _client(session).upload_territory(record)

    method, _, kwargs = session.calls[0]
    assert method == "POST"
    assert kwargs["headers"]["Prefer"] == "return=minimal"
    assert kwargs["json"]["user_id"] == "me"
    assert kwargs["json"]["polygon"].startswith("SRID=4326;POLYGON")


@pytest.mark.parametrize(
    "response",
    [
        FakeResp(status_code=500),
        requests.exceptions.ConnectionError("offline"),
        FakeResp(data=ValueError("not json")),
        FakeResp(data={"message": "unexpected"}),
    ],
)
def test_store_failures_raise_store_error(response):
    client = _client(FakeSession([response]))
    with pytest.raises(TerritoryStoreError):
        client.load_active_territories()


def test_unconfigured_client_raises():
    client = TerritoryClient("", "", session=FakeSession([]))
    assert not client.configured
    with pytest.raises(TerritoryStoreError):
        client.load_active_territories()
