"""REST client for the shared territories table."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    HTTP_POOL_CONNECTIONS,
    HTTP_POOL_MAXSIZE,
    REQUEST_TIMEOUT,
    TERRITORY_API_KEY,
    TERRITORY_API_URL,
    TERRITORY_TABLE,
)
from ..errors import TerritoryDataError, TerritoryStoreError
from ..models import ClaimedTerritory
from .records import TerritoryRecord, territory_from_row


def _build_retry() -> Retry:
    return Retry(
        total=3,
        backoff_factor=1.0,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET", "POST"],
    )


def create_session() -> Session:
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=_build_retry(),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"Accept": "application/json"})
    return session


class TerritoryClient:
    """Loads active territories and uploads new claims."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        table: str = TERRITORY_TABLE,
        session: Optional[Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = (base_url if base_url is not None else TERRITORY_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else TERRITORY_API_KEY
        self.table = table
        self.session = session or create_session()
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(self, method: str, **kwargs: Any) -> requests.Response:
        if not self.configured:
            raise TerritoryStoreError("Territory store URL is not configured")
        url = f"{self.base_url}/{self.table}"
        headers = self._headers()
        headers.update(kwargs.pop("headers", {}))
        self.logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TerritoryStoreError(f"{method} {url} failed: {exc}") from exc
        return resp

    def load_active_territories(self) -> List[ClaimedTerritory]:
        """Fetch every active territory; malformed rows are skipped."""

        resp = self._request("GET", params={"select": "*", "is_active": "eq.true"})
        try:
            rows = resp.json()
        except ValueError as exc:
            raise TerritoryStoreError("Territory store returned invalid JSON") from exc
        if not isinstance(rows, list):
            raise TerritoryStoreError("Territory store returned a non-list body")

        territories: List[ClaimedTerritory] = []
        for row in rows:
            try:
                territories.append(territory_from_row(row))
            except TerritoryDataError as exc:
                self.logger.warning("Skipping malformed territory row: %s", exc)
        self.logger.info("Loaded %d active territories", len(territories))
        return territories

    def upload_territory(self, record: TerritoryRecord) -> None:
        """Insert one claimed territory."""

        self._request(
            "POST",
            json=record.to_payload(),
            headers={"Prefer": "return=minimal"},
        )
        self.logger.info(
            "Uploaded territory for owner=%s area=%.1f m2 points=%d",
            record.owner_id,
            record.area_m2,
            record.point_count,
        )


__all__ = ["TerritoryClient", "create_session"]
