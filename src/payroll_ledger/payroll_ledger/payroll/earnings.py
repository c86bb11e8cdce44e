from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..common.money import ZERO, round2
from ..core.enums import AttendanceStatus
from ..workers.model import Worker


@dataclass(frozen=True)
class WorkerEarnings:
    """What a worker earned from attendance over a window (before payments)."""

    worker_id: int
    present_days: int
    half_days: int
    days_worked: Decimal
    approved_overtime_hours: Decimal
    daily_rate: Decimal
    overtime_rate: Decimal
    base_amount: Decimal
    overtime_amount: Decimal

    @property
    def total(self) -> Decimal:
        return round2(self.base_amount + self.overtime_amount)


def active_window(worker: Worker, start: date, end: date) -> Optional[Tuple[date, date]]:
    """Clip [start, end] to the days the worker was employed and not cut off."""

    if worker.join_date and worker.join_date > start:
        start = worker.join_date
    if not worker.is_active:
        if worker.inactive_from is None:
            return None
        end = min(end, worker.inactive_from - timedelta(days=1))
    if end < start:
        return None
    return start, end


def compute_earnings(
    worker: Worker,
    records: Iterable[AttendanceRecord],
    *,
    start: date,
    end: date,
) -> WorkerEarnings:
    """Days × per-day rate plus approved overtime hours × overtime rate.

    Present counts a full day and half-day counts 0.5. Records outside the
    worker's active window are ignored.
    """

    rates = worker.pay.breakdown
    window = active_window(worker, start, end)

    present = 0
    half = 0
    days = ZERO
    overtime_hours = ZERO
    if window is not None:
        lo, hi = window
        for r in records:
            if r.worker_id != worker.worker_id or not (lo <= r.work_date <= hi):
                continue
            if r.status == AttendanceStatus.PRESENT:
                present += 1
            elif r.status == AttendanceStatus.HALF_DAY:
                half += 1
            days += r.day_units
            overtime_hours += r.approved_overtime_hours

    return WorkerEarnings(
        worker_id=worker.worker_id,
        present_days=present,
        half_days=half,
        days_worked=round2(days),
        approved_overtime_hours=round2(overtime_hours),
        daily_rate=rates.daily_rate,
        overtime_rate=rates.overtime_rate,
        base_amount=round2(days * rates.daily_rate),
        overtime_amount=round2(overtime_hours * rates.overtime_rate),
    )
