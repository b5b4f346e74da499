from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import is_valid_hhmm, parse_iso_date, parse_iso_instant


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_hhmm(value: Optional[str], field_name: str) -> str:
    value = require_non_empty(value, field_name)
    if not is_valid_hhmm(value):
        raise ValidationError(f"{field_name} must be HH:MM")
    return value


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    text = require_non_empty(value, field_name)
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_instant(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    text = require_non_empty(value, field_name)
    try:
        return parse_iso_instant(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp")


def optional_instant(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_instant(value, field_name)


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number
