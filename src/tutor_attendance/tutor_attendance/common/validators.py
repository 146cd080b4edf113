from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_number_in_range(value: Any, field_name: str, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Please enter valid {field_name} ({low:g}-{high:g})") from e
    if number != number:
        raise ValidationError(f"Please enter valid {field_name} ({low:g}-{high:g})")
    if number < low or number > high:
        raise ValidationError(f"{field_name.capitalize()} must be between {low:g} and {high:g}")
    return number


def optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
