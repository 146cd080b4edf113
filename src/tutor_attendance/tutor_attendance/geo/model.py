from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in degrees.

    The constructor does not validate so distance math stays total; use
    `checked` for anything coming from a device or the backend.
    """

    latitude: float
    longitude: float

    @classmethod
    def checked(cls, latitude: Any, longitude: Any) -> "Coordinate":
        try:
            lat = float(latitude)
            lng = float(longitude)
        except (TypeError, ValueError) as e:
            raise ValidationError("Coordinates must be numbers") from e
        if not -90.0 <= lat <= 90.0:
            raise ValidationError(f"Latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise ValidationError(f"Longitude out of range: {lng}")
        return cls(lat, lng)

    @classmethod
    def from_pair(cls, pair: Optional[Sequence[Any]]) -> Optional["Coordinate"]:
        """Backend pairs are stored as [latitude, longitude]."""
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            return None
        return cls.checked(pair[0], pair[1])

    def as_pair(self) -> list[float]:
        return [self.latitude, self.longitude]


def _safe_pair(pair: Any) -> Optional[Coordinate]:
    # A center with broken coordinates is treated as having none.
    try:
        return Coordinate.from_pair(pair)
    except ValidationError:
        return None


@dataclass(frozen=True)
class Center:
    """A tuition center the tutor is assigned to."""

    center_id: str
    name: str
    coordinate: Optional[Coordinate]
    location: Optional[str] = None
    enabled: bool = True

    @classmethod
    def from_api(cls, data: Optional[dict]) -> Optional["Center"]:
        if not data:
            return None
        return cls(
            center_id=str(data.get("_id", "")),
            name=str(data.get("name", "")),
            location=data.get("location"),
            coordinate=_safe_pair(data.get("coordinates")),
            enabled=bool(data.get("enabled", True)),
        )
