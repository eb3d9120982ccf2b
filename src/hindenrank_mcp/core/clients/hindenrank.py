"""Hindenrank API client.

API base: https://hindenrank.com/api/v1
Anonymous access works for lookups and search. Comparison needs an API key
(free tier or above), sent as the ``X-API-Key`` header.

One request per call: no caching, no retries. Rate-limit metadata in the
response envelope is logged, not acted on.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..models import ApiResponse, ComparisonResult, Protocol, SectorInfo

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hindenrank.com/api/v1"
DEFAULT_TIMEOUT = 30.0
CONNECT_TIMEOUT = 10.0


class HindenrankAPIError(Exception):
    """Any failed call: non-2xx status, unreachable service, or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProtocolNotFoundError(HindenrankAPIError):
    """The service answered 404 for the requested resource."""


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of an error body, falling back to the status code."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {response.status_code}"


class HindenrankClient:
    """Read-only client for the Hindenrank protocol risk API.

    Holds configuration only. Each call opens its own ``httpx.AsyncClient``,
    so one instance can be shared across concurrent tool calls.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key or None
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = httpx.Timeout(timeout, connect=min(CONNECT_TIMEOUT, timeout))
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def has_api_key(self) -> bool:
        return self._api_key is not None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        return headers

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict:
        """GET ``path`` under the base URL and return the decoded JSON envelope."""
        query = {key: value for key, value in (params or {}).items() if value is not None and value != ""}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(f"{self._base_url}{path}", params=query or None, headers=self._headers())
            except httpx.TransportError as exc:
                logger.warning("Hindenrank request %s failed: %s", path, exc)
                raise HindenrankAPIError(f"Could not reach Hindenrank API: {exc}") from exc

        if not response.is_success:
            message = _error_message(response)
            if response.status_code == 404:
                logger.info("Hindenrank request %s returned 404: %s", path, message)
                raise ProtocolNotFoundError(message, status_code=404)
            logger.warning("Hindenrank request %s returned %d: %s", path, response.status_code, message)
            raise HindenrankAPIError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Hindenrank request %s returned a non-JSON body", path)
            raise HindenrankAPIError(f"Invalid JSON in response from {path}", status_code=response.status_code) from exc

        meta = payload.get("meta") if isinstance(payload, dict) else None
        if isinstance(meta, dict):
            logger.debug("Hindenrank %s ok (tier=%s, rateLimit=%s)", path, meta.get("tier"), meta.get("rateLimit"))
        return payload

    @staticmethod
    def _parse(model: type, payload: dict, path: str):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Unexpected response shape from %s: %s", path, exc)
            raise HindenrankAPIError(f"Unexpected response shape from {path}") from exc

    async def get_protocol(self, slug: str) -> ApiResponse[Protocol]:
        """Fetch one protocol by slug. Raises ProtocolNotFoundError if it doesn't exist."""
        if not slug:
            raise ValueError("slug must be a non-empty string")
        path = f"/protocols/{quote(slug, safe='')}"
        payload = await self._get(path)
        return self._parse(ApiResponse[Protocol], payload, path)

    async def search_protocols(self, query: str, limit: int = 10) -> ApiResponse[list[Protocol]]:
        """Fuzzy search by name. An empty result list is not an error."""
        path = "/protocols/search"
        payload = await self._get(path, {"q": query, "limit": limit})
        return self._parse(ApiResponse[list[Protocol]], payload, path)

    async def list_protocols(
        self,
        sector: Optional[str] = None,
        min_grade: Optional[str] = None,
        max_grade: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ApiResponse[list[Protocol]]:
        """List protocols with optional filters.

        Filters go to the service as-is; grade bounds and sector names are
        validated there. ``meta.total`` carries the unpaginated count.
        """
        path = "/protocols"
        params = {
            "sector": sector,
            "minGrade": min_grade,
            "maxGrade": max_grade,
            "limit": limit,
            "offset": offset,
        }
        payload = await self._get(path, params)
        return self._parse(ApiResponse[list[Protocol]], payload, path)

    async def compare_protocols(self, slugs: list[str]) -> ApiResponse[ComparisonResult]:
        """Compare protocols by slug. The service enforces the 2-5 limit."""
        path = "/protocols/compare"
        payload = await self._get(path, {"slugs": ",".join(slugs)})
        return self._parse(ApiResponse[ComparisonResult], payload, path)

    async def list_sectors(self) -> ApiResponse[list[SectorInfo]]:
        """All sectors with protocol counts and average risk scores."""
        path = "/sectors"
        payload = await self._get(path)
        return self._parse(ApiResponse[list[SectorInfo]], payload, path)
