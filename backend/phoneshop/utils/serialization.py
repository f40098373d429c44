from __future__ import annotations
from datetime import datetime
from typing import Any

from phoneshop.time_utils import to_utc_z


def jsonable(value: Any) -> Any:
    """Recursively convert datetimes in analytics payloads to ISO 'Z' strings."""
    if isinstance(value, datetime):
        return to_utc_z(value)
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
