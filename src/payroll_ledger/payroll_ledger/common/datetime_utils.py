from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Optional, Tuple

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def today_local() -> date:
    """Current local calendar day.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def now_local() -> datetime:
    return datetime.now()


def is_valid_hhmm(value: Optional[str]) -> bool:
    return bool(value) and TIME_PATTERN.match(value) is not None


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def month_range(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])
