"""Geolocation DTOs.

Mirror the subset of the PositionStack ``/v1/forward`` response the
application exposes.  Unknown provider fields are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class GeolocationDTO(BaseModel):
    """One candidate location for the queried address."""

    model_config = ConfigDict(frozen=True)

    address: str = ""
    latitude: float
    longitude: float
    type: Optional[str] = None
    locality: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


class GeolocationData(BaseModel):
    """Result rows for a single address query."""

    model_config = ConfigDict(frozen=True)

    data: List[GeolocationDTO]

    def with_address(self, address: str) -> GeolocationData:
        """Return a copy whose rows echo ``address`` back."""
        return GeolocationData(
            data=[row.model_copy(update={"address": address}) for row in self.data]
        )
