from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_int_between(value: Any, field_name: str, min_value: int, max_value: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, bool) or not (min_value <= number <= max_value):
        raise ValidationError(f"{field_name} must be between {min_value} and {max_value}")
    return number
