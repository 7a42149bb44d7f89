from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not a valid id")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid id")
    if ident <= 0:
        raise ValidationError(f"{field_name} is not a valid id")
    return ident


def require_non_empty_list(values: Any, field_name: str) -> list:
    """Check the container only; items are validated one by one by the caller."""
    if not isinstance(values, (list, tuple)) or not values:
        raise ValidationError(f"{field_name} must be a non-empty list")
    return list(values)
