from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import AttendanceStatus, DisplayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): one worker-day of attendance.

    Only `status` is mandatory. Overtime is stored as PRESENT with
    `overtime_hours > 0`; `display_status` derives the UI tag from that.
    """

    attendance_id: int
    worker_id: int
    work_date: date
    status: AttendanceStatus
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    hours_worked: Decimal = Decimal("0.00")
    overtime_hours: Decimal = Decimal("0.00")
    is_approved: bool = False
    project_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def display_status(self) -> DisplayStatus:
        if self.status == AttendanceStatus.PRESENT and self.overtime_hours > 0:
            return DisplayStatus.OVERTIME
        return DisplayStatus(self.status.value)

    @property
    def day_units(self) -> Decimal:
        """Billable days: present counts 1, half-day 0.5, anything else 0."""

        if self.status == AttendanceStatus.PRESENT:
            return Decimal("1")
        if self.status == AttendanceStatus.HALF_DAY:
            return Decimal("0.5")
        return Decimal("0")

    @property
    def approved_overtime_hours(self) -> Decimal:
        return self.overtime_hours if self.is_approved else Decimal("0.00")

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "workerId": self.worker_id,
            "date": format_iso_date(self.work_date),
            "status": self.status.value,
            "displayStatus": self.display_status.value,
            "checkIn": self.check_in,
            "checkOut": self.check_out,
            "hoursWorked": float(self.hours_worked),
            "overtimeHours": float(self.overtime_hours),
            "isApproved": self.is_approved,
            "project": self.project_id,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class DaySheetRow:
    worker_id: int
    full_name: str
    display_status: DisplayStatus
    record: Optional[AttendanceRecord]
    editable: bool = True
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "workerId": self.worker_id,
            "name": self.full_name,
            "displayStatus": self.display_status.value,
            "record": self.record.to_dict() if self.record else None,
            "editable": self.editable,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class DaySheet:
    """Attendance for one calendar day.

    Workers past their inactive cut-off are listed under `hidden` with the
    reason, so callers can explain why they cannot be marked.
    """

    work_date: date
    rows: list[DaySheetRow] = field(default_factory=list)
    hidden: list[DaySheetRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": format_iso_date(self.work_date),
            "rows": [r.to_dict() for r in self.rows],
            "hidden": [r.to_dict() for r in self.hidden],
        }


@dataclass(frozen=True)
class AttendanceStats:
    start: date
    end: date
    total_records: int = 0
    present_count: int = 0
    absent_count: int = 0
    half_day_count: int = 0
    on_leave_count: int = 0
    overtime_days: int = 0
    total_hours_worked: Decimal = Decimal("0.00")
    total_overtime_hours: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        return {
            "range": {"start": format_iso_date(self.start), "end": format_iso_date(self.end)},
            "totalRecords": self.total_records,
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "halfDayCount": self.half_day_count,
            "onLeaveCount": self.on_leave_count,
            "overtimeDays": self.overtime_days,
            "totalHoursWorked": float(self.total_hours_worked),
            "totalOvertime": float(self.total_overtime_hours),
        }
