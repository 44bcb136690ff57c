"""Geolocation lookup services.

``IGeolocationService`` is the capability the customer service depends
on: resolve a free-text address to coordinates, or report ``None``.
Every expected failure (missing credential, cancellation, transport
error, timeout, non-2xx status, malformed body, zero results) collapses
to ``None``; the specific cause is only visible in the logs.

A single attempt is made per call: no retries, no caching.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx
import structlog
from django.conf import settings
from pydantic import ValidationError

from modules.geolocation.dtos import GeolocationData, GeolocationDTO

logger = structlog.get_logger(__name__)


def _parse_rows(rows: List[Any], log) -> GeolocationData:
    """Keep the rows that carry coordinates; skip the malformed ones."""
    valid: List[GeolocationDTO] = []
    skipped = 0
    for row in rows:
        try:
            valid.append(GeolocationDTO.model_validate(row))
        except ValidationError:
            skipped += 1
    if skipped:
        log.warning("geolocation.rows_skipped", skipped=skipped, kept=len(valid))
    return GeolocationData(data=valid)


class IGeolocationService(ABC):
    """Capability contract for address geolocation."""

    @abstractmethod
    def resolve(
        self, address: str, cancel: Optional[threading.Event] = None
    ) -> Optional[GeolocationData]:
        """Return geolocation rows for ``address`` or ``None`` on any failure."""


class PositionStackGeolocationService(IGeolocationService):
    """Forward geocoding through the PositionStack HTTP API.

    The access key is read from ``settings.POSITIONSTACK_API_KEY`` at call
    time unless one is passed explicitly, so a missing key degrades the
    lookup instead of failing at startup.
    """

    FORWARD_PATH = "/v1/forward"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._owns_client = client is None
        if client is None:
            timeout = timeout if timeout is not None else settings.GEOLOCATION_TIMEOUT_SECONDS
            client = httpx.Client(
                base_url=base_url or settings.POSITIONSTACK_BASE_URL,
                timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            )
        self._client = client

    @property
    def api_key(self) -> str:
        if self._api_key is not None:
            return self._api_key
        return getattr(settings, "POSITIONSTACK_API_KEY", "") or ""

    def resolve(
        self, address: str, cancel: Optional[threading.Event] = None
    ) -> Optional[GeolocationData]:
        log = logger.bind(provider="positionstack")

        access_key = self.api_key
        if not access_key:
            log.error("geolocation.missing_api_key")
            return None

        if cancel is not None and cancel.is_set():
            log.warning("geolocation.cancelled")
            return None

        try:
            response = self._client.get(
                self.FORWARD_PATH,
                params={"access_key": access_key, "query": address},
            )
        except httpx.TimeoutException as exc:
            log.warning("geolocation.timeout", error=type(exc).__name__)
            return None
        except httpx.HTTPError as exc:
            # The exception text may embed the request URL (and the key).
            log.error("geolocation.request_failed", error=type(exc).__name__)
            return None

        if cancel is not None and cancel.is_set():
            log.warning("geolocation.cancelled", status_code=response.status_code)
            return None

        if response.is_error:
            log.error(
                "geolocation.http_error",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )
            return None

        try:
            body = response.json()
        except ValueError as exc:
            log.error("geolocation.invalid_response", error=type(exc).__name__)
            return None

        rows = body.get("data") if isinstance(body, dict) else None
        if not isinstance(rows, list):
            log.error("geolocation.invalid_response", error="missing data")
            return None

        payload = _parse_rows(rows, log)
        if not payload.data:
            log.warning("geolocation.no_results", status_code=response.status_code)
            return None

        log.info("geolocation.resolved", results=len(payload.data))
        return payload.with_address(address)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> PositionStackGeolocationService:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
