from __future__ import annotations
from typing import Any, Dict, List, Optional
from phoneshop.errors import ValidationError


def _sort_key(field: str):
    # None sorts first ascending, last descending
    def key(row: Dict[str, Any]):
        value = row.get(field)
        return (value is not None, value)
    return key


def apply_multi_sort(rows: List[Dict[str, Any]], sort_expr: Optional[str], allowed: set, tie_breaker: str = 'id'):
    """Apply multi-field sort to serialized rows.
    sort_expr: comma-separated tokens, each optionally prefixed with '-'.
    allowed: set of sortable keys.
    tie_breaker: key appended for deterministic ordering.
    Without a sort expression the incoming order is kept.
    """
    if not sort_expr:
        return list(rows)
    tokens = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        if key not in allowed:
            raise ValidationError(f'Invalid sort field {key}')
        tokens.append((key, desc))
    out = sorted(rows, key=_sort_key(tie_breaker))
    # Stable sorts applied from the least to the most significant key
    for key, desc in reversed(tokens):
        out.sort(key=_sort_key(key), reverse=desc)
    return out
