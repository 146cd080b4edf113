from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geo.model import Center


@dataclass(frozen=True)
class TutorSession:
    """What we store into the Flask session after login."""

    tutor_id: str
    name: str
    phone: str
    token: str
    email: Optional[str] = None
    role: Optional[str] = None
    center: Optional[Center] = None

    def to_session(self) -> dict:
        center = self.center
        return {
            "tutor_id": self.tutor_id,
            "name": self.name,
            "phone": self.phone,
            "token": self.token,
            "center": None
            if center is None
            else {
                "_id": center.center_id,
                "name": center.name,
                "location": center.location,
                "coordinates": center.coordinate.as_pair() if center.coordinate else None,
            },
        }
