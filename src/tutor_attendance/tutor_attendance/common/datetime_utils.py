from __future__ import annotations

import re
from datetime import date, datetime

from ..core.constants import PASS_YEAR_PIVOT
from ..core.exceptions import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SHORT_DATE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_api_date(value: str) -> str:
    """Normalize a form date (DD-MM-YY or YYYY-MM-DD) to the backend's YYYY-MM-DD.

    Two-digit years below 30 are read as 20xx, the rest as 19xx.
    """
    text = (value or "").strip()
    if _ISO_DATE.match(text):
        try:
            return parse_iso_date(text).isoformat()
        except ValueError as e:
            raise ValidationError(f"Invalid exam date: {text}") from e

    m = _SHORT_DATE.match(text)
    if not m:
        raise ValidationError("Exam date must be DD-MM-YY or YYYY-MM-DD")

    day, month, yy = (int(p) for p in m.groups())
    year = 2000 + yy if yy < PASS_YEAR_PIVOT else 1900 + yy
    try:
        return date(year, month, day).isoformat()
    except ValueError as e:
        raise ValidationError(f"Invalid exam date: {text}") from e


def to_display_date(iso_value: str) -> str:
    """YYYY-MM-DD (or a full ISO timestamp) into DD-MM-YY for forms."""
    try:
        d = datetime.fromisoformat(iso_value.replace("Z", "+00:00")).date()
    except (AttributeError, ValueError):
        return iso_value or ""
    return d.strftime("%d-%m-%y")


def format_month(value: str) -> str:
    """'2025-03' -> 'March 2025'. Unknown formats come back unchanged."""
    parts = value.split("-") if value and "-" in value and len(value) <= 7 else None
    if parts and len(parts) >= 2:
        try:
            return date(int(parts[0]), int(parts[1]), 1).strftime("%B %Y")
        except ValueError:
            return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%B %Y")
    except (AttributeError, ValueError):
        return value
