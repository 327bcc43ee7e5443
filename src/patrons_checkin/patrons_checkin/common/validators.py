from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_present(**values: Any) -> None:
    """Raise ValidationError naming the first argument that is None or blank."""
    for name, value in values.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{name} is required")


def require_secret(value: Any, field_name: str) -> str:
    """Like require_non_empty, but returns the value untouched (passwords keep their whitespace)."""
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_table_number(value: Any, field_name: str = "tableNumber") -> str:
    """Table numbers arrive as strings or integers; both normalise to a stripped string."""
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return require_non_empty(value, field_name)
