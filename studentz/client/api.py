"""HTTP client for the portal API.

Usage:
    client = PortalClient("http://localhost:4000")
    report = client.create_report({"name": "...", "college": "...", "details": "..."})
    members = client.list_members(limit=10)
"""

import logging
from typing import Any

import requests

from ..config import Config
from ..domain import RecordKind
from ..errors.exceptions import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

# the server or its store did not answer in time
UNAVAILABLE_STATUSES = {502, 503, 504}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ApiError(Exception):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, message: str, body: dict | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body or {}

    @property
    def message(self) -> str:
        return str(self)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class PortalClient:
    """Thin wrapper around the /api endpoints."""

    def __init__(self, base_url: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = (base_url or Config.API_BASE).rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def health(self) -> dict:
        return self._request("GET", "/api/health")

    def create(self, kind: RecordKind, payload: dict[str, Any]) -> dict:
        """POST a record and return the full response body.

        Raises:
            ApiError:         Any non-2xx response (400 missing fields, 500 duplicate ID, ...)
            TransportFailure: Timeout, connection failure or 502/503/504
        """
        return self._request("POST", f"/api/{kind.spec.plural}", json=payload)

    def list_records(self, kind: RecordKind, limit: int | None = None) -> list[dict]:
        params = {"limit": limit} if limit is not None else None
        data = self._request("GET", f"/api/{kind.spec.plural}", params=params)
        return data.get(kind.spec.plural, [])

    def create_report(self, payload: dict[str, Any]) -> dict:
        return self.create(RecordKind.REPORT, payload).get("report") or {}

    def create_member(self, payload: dict[str, Any]) -> dict:
        return self.create(RecordKind.MEMBER, payload).get("member") or {}

    def list_reports(self, limit: int | None = None) -> list[dict]:
        return self.list_records(RecordKind.REPORT, limit)

    def list_members(self, limit: int | None = None) -> list[dict]:
        return self.list_records(RecordKind.MEMBER, limit)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise TransportFailure(
                f"Request timed out after {self._timeout}s while contacting '{url}'"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise TransportFailure(
                f"Unable to reach the portal server at '{self.base_url}'"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportFailure(f"Request to '{url}' failed: {exc.__class__.__name__}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code in UNAVAILABLE_STATUSES:
            raise TransportFailure(
                f"Portal server unavailable ({response.status_code}): {data.get('error') or url}"
            )
        if not response.ok:
            logger.warning("%s %s -> %s", method, url, response.status_code)
            raise ApiError(response.status_code, data.get("error") or "", data)

        return data
