"""Address geolocation capability (external forward-geocoding lookup)."""

from modules.geolocation.dtos import GeolocationData, GeolocationDTO
from modules.geolocation.services import IGeolocationService, PositionStackGeolocationService

__all__ = [
    "GeolocationDTO",
    "GeolocationData",
    "IGeolocationService",
    "PositionStackGeolocationService",
]
