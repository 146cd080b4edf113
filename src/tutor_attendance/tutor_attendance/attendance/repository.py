from __future__ import annotations

from typing import Any, Dict, Protocol

from ..geo.model import Coordinate


class AttendanceBackend(Protocol):
    """The slice of the REST backend the attendance core talks to."""

    async def submit_attendance(self, coordinate: Coordinate) -> Dict[str, Any]:
        raise NotImplementedError

    async def get_button_status(self) -> Dict[str, Any]:
        raise NotImplementedError

    async def get_recent_attendance(self) -> list:
        raise NotImplementedError


class LocationProvider(Protocol):
    async def get_current_location(self) -> Coordinate:
        """May raise LocationPermissionDeniedError or LocationUnavailableError."""
        raise NotImplementedError
