from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from ..common.datetime_utils import time_to_minutes
from ..common.money import ZERO, round2
from ..common.validators import optional_time
from ..core.constants import MINUTES_PER_DAY, STANDARD_WORK_HOURS
from ..core.enums import AttendanceStatus, DisplayStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceInput:
    """Validated attendance values, ready to persist."""

    status: AttendanceStatus
    display_status: DisplayStatus
    check_in: Optional[str]
    check_out: Optional[str]


def _span_minutes(check_in: Optional[str], check_out: Optional[str]) -> int:
    """Minutes between two HH:MM times; a check-out before check-in crosses midnight."""

    if not check_in or not check_out:
        return 0
    start = time_to_minutes(check_in)
    end = time_to_minutes(check_out)
    if end < start:
        end += MINUTES_PER_DAY
    return end - start


def worked_hours(check_in: Optional[str], check_out: Optional[str]) -> Decimal:
    minutes = _span_minutes(check_in, check_out)
    if minutes <= 0:
        return round2(ZERO)
    return round2(Decimal(minutes) / Decimal(60))


def evaluate_overtime(
    check_in: Optional[str],
    check_out: Optional[str],
    status: Union[DisplayStatus, str, None],
) -> Decimal:
    """Hours beyond a standard 8h day, only for days tagged as overtime."""

    if str(getattr(status, "value", status) or "") != DisplayStatus.OVERTIME.value:
        return round2(ZERO)
    hours = worked_hours(check_in, check_out)
    if hours <= 0:
        return round2(ZERO)
    return round2(max(ZERO, hours - STANDARD_WORK_HOURS))


def parse_display_status(value: Union[DisplayStatus, str, None]) -> DisplayStatus:
    v = str(getattr(value, "value", value) or "").strip().lower()
    if not v:
        raise ValidationError("Status is required", field="status")
    try:
        status = DisplayStatus(v)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {v}", field="status")
    if status == DisplayStatus.NOT_MARKED:
        raise ValidationError("Use delete to clear a day's attendance", field="status")
    return status


def to_stored_status(status: DisplayStatus) -> AttendanceStatus:
    if status == DisplayStatus.OVERTIME:
        return AttendanceStatus.PRESENT
    return AttendanceStatus(status.value)


def validate_attendance(
    status: Union[DisplayStatus, str, None],
    check_in: Optional[str] = None,
    check_out: Optional[str] = None,
) -> AttendanceInput:
    """Check an attendance submission; each failure names the offending field.

    A check-in equal to check-out is rejected rather than corrected.
    """

    display = parse_display_status(status)
    cin = optional_time(check_in, "check_in")
    cout = optional_time(check_out, "check_out")
    if cin and cout and cin == cout:
        raise ValidationError("Check Out cannot be same as Check In", field="check_out")

    return AttendanceInput(
        status=to_stored_status(display),
        display_status=display,
        check_in=cin,
        check_out=cout,
    )
