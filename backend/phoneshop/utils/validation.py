from __future__ import annotations
"""Payload validation helpers shared by the domain services.

All of them raise ValidationError, which the app maps to a 400.
"""
from typing import Any, Iterable, Mapping, Optional
from phoneshop.errors import ValidationError
from phoneshop.time_utils import end_of_day, parse_iso_datetime


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or raises ValidationError.
    """
    if new_status not in allowed:
        raise ValidationError(f"{field_name} invalid")
    return new_status


def require_fields(data: Mapping[str, Any], *names: str) -> None:
    missing = [n for n in names if data.get(n) in (None, '')]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


def coerce_int(value: Any, field_name: str, minimum: Optional[int] = None) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be int")
    if minimum is not None and out < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    return out


def coerce_float(value: Any, field_name: str, default: Optional[float] = None) -> float:
    """Parse a number; with ``default`` set, unparsable input yields the default instead of an error."""
    try:
        return float(value)
    except (TypeError, ValueError):
        if default is not None:
            return default
        raise ValidationError(f"{field_name} must be a number")


def coerce_datetime(value: Any, field_name: str):
    """Parse YYYY-MM-DD or ISO-8601 into a naive UTC datetime; None and '' pass through as None."""
    try:
        return parse_iso_datetime(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an ISO-8601 date")


def coerce_range_end(value: Any, field_name: str):
    """Like coerce_datetime, but a bare YYYY-MM-DD covers that whole day."""
    dt = coerce_datetime(value, field_name)
    if dt is not None and isinstance(value, str) and len(value.strip()) == 10:
        return end_of_day(dt)
    return dt


def pick(data: Mapping[str, Any], fields: Iterable[str]) -> dict:
    return {k: data[k] for k in fields if k in data}


__all__ = ['validate_status', 'require_fields', 'coerce_int', 'coerce_float', 'coerce_datetime', 'coerce_range_end', 'pick']
