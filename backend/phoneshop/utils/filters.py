from __future__ import annotations
from typing import Any, Dict, List
from phoneshop.errors import ValidationError

def apply_filters(rows: List[Any], specs: Dict[str, Dict[str, Any]], params: Dict[str, Any]):
    """Generic filter builder over in-memory rows.

    specs: { param_name: { 'match': callable(row, value)->bool, 'coerce': type/func, 'validate': callable(optional) } }
    """
    for name, meta in specs.items():
        if name not in params or params[name] is None:
            continue
        val = params[name]
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except (TypeError, ValueError):
                raise ValidationError(f'{name} invalid')
        if 'validate' in meta and not meta['validate'](val):
            raise ValidationError(f'{name} invalid')
        rows = [r for r in rows if meta['match'](r, val)]
    return rows
