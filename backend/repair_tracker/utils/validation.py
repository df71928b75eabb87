"""Reusable validation helpers for job input.

Each helper appends to a shared error list instead of raising, so one request reports
every bad field at once; `raise_if_errors` turns the list into a ValidationError.
"""
from __future__ import annotations
import re
from typing import Any, Dict, Iterable, List, Optional
from repair_tracker.errors import ValidationError

# Thai mobile numbers: 0XXXXXXXXX, 66XXXXXXXXX or +66XXXXXXXXX
TH_MOBILE_RE = re.compile(r'^(\+66|66|0)\d{9}$')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

ErrorList = List[Dict[str, str]]


def normalize_phone(raw: str) -> str:
    return re.sub(r'[\s-]', '', raw)


def is_thai_mobile(raw: str) -> bool:
    return bool(TH_MOBILE_RE.match(normalize_phone(raw)))


def require_text(data: Dict[str, Any], key: str, field: str, message: str, errors: ErrorList) -> Optional[str]:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        errors.append({'field': field, 'message': message})
        return None
    return value.strip()


def optional_text(data: Dict[str, Any], key: str, field: str, errors: ErrorList) -> Optional[str]:
    value = data.get(key)
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        errors.append({'field': field, 'message': f'{field} must be a string'})
        return None
    return value.strip() or None


def optional_amount(data: Dict[str, Any], key: str, field: str, errors: ErrorList) -> Optional[float]:
    if key not in data or data[key] is None or data[key] == '':
        return None
    value = data[key]
    if isinstance(value, bool):
        errors.append({'field': field, 'message': f'{field} must be a number'})
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        errors.append({'field': field, 'message': f'{field} must be a number'})
        return None
    if amount < 0:
        errors.append({'field': field, 'message': f'{field} must not be negative'})
        return None
    return amount


def validate_choice(value: str, allowed: Iterable[str], field: str, errors: ErrorList) -> Optional[str]:
    if value not in allowed:
        errors.append({'field': field, 'message': f'{field} invalid'})
        return None
    return value


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or raises ValidationError.
    """
    if new_status not in allowed:
        raise ValidationError.single(field_name, f"{field_name} invalid")
    return new_status


def raise_if_errors(errors: ErrorList):
    if errors:
        raise ValidationError(errors)

__all__ = [
    'normalize_phone', 'is_thai_mobile', 'require_text', 'optional_text', 'optional_amount',
    'validate_choice', 'validate_status', 'raise_if_errors', 'EMAIL_RE',
]
