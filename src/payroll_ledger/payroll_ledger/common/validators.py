from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import is_valid_hhmm, parse_iso_date


def optional_time(value: Optional[str], field_name: str) -> Optional[str]:
    """Accept H:MM / HH:MM (00-23:00-59) or empty."""
    v = (value or "").strip()
    if not v:
        return None
    if not is_valid_hhmm(v):
        raise ValidationError(f"{field_name} must be in HH:MM format", field=field_name)
    hours, minutes = v.split(":")
    return f"{int(hours):02d}:{minutes}"


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)", field=field_name)


def optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return require_date(value, field_name)


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
