from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.exceptions import LocationPermissionDeniedError, LocationUnavailableError
from ..geo.model import Coordinate


@dataclass(frozen=True)
class ReportedLocationProvider:
    """Location fix reported by the device along with the request.

    `permission_denied` mirrors the device refusing location access.
    """

    coordinate: Optional[Coordinate]
    permission_denied: bool = False

    async def get_current_location(self) -> Coordinate:
        if self.permission_denied:
            raise LocationPermissionDeniedError("Location permission is required to mark attendance")
        if self.coordinate is None:
            raise LocationUnavailableError("No location fix reported")
        return self.coordinate

    @classmethod
    def from_payload(cls, data: Optional[dict]) -> "ReportedLocationProvider":
        data = data or {}
        if data.get("permissionDenied"):
            return cls(coordinate=None, permission_denied=True)
        lat: Any = data.get("lat", data.get("latitude"))
        lng: Any = data.get("lng", data.get("longitude"))
        if lat is None or lng is None:
            return cls(coordinate=None)
        return cls(coordinate=Coordinate.checked(lat, lng))
