from __future__ import annotations
from typing import Any, Dict
from repair_tracker.errors import ValidationError

def apply_filters(query, specs: Dict[str, Dict[str, Any]], params: Dict[str, Any]):
    """Generic filter builder.

    specs: { param_name: { 'op': callable(query, value)->query, 'coerce': type/func, 'validate': callable(optional) } }
    Unknown params are a programming error and raise ValueError.
    """
    unknown = set(params) - set(specs)
    if unknown:
        raise ValueError(f'Unsupported filters: {sorted(unknown)}')
    for name, meta in specs.items():
        if name not in params or params[name] is None:
            continue
        val = params[name]
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except (TypeError, ValueError):
                raise ValidationError.single(name, f'{name} invalid')
        if 'validate' in meta and not meta['validate'](val):
            raise ValidationError.single(name, f'{name} invalid')
        query = meta['op'](query, val)
    return query
