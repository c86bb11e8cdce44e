from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Optional, Tuple

from ..common.money import money_sum
from ..core.enums import AttendanceStatus, DisplayStatus
from ..core.exceptions import AttendanceNotFoundError, ValidationError
from ..workers.eligibility import cutoff_reason, ensure_eligible
from ..workers.repository import WorkerRepository
from ..workers.service import WorkerService
from .evaluator import evaluate_overtime, validate_attendance, worked_hours
from .model import AttendanceRecord, AttendanceStats, DaySheet, DaySheetRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, workers: WorkerRepository):
        self._attendance = attendance
        self._workers = workers
        self._worker_service = WorkerService(workers)

    def mark(
        self,
        *,
        worker_id: int,
        work_date: date,
        status: str,
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        notes: Optional[str] = None,
        project_id: Optional[int] = None,
    ) -> Tuple[AttendanceRecord, bool]:
        """Create or replace the worker's record for `work_date` (last write wins)."""

        data = validate_attendance(status, check_in, check_out)
        worker = self._worker_service.get_worker(worker_id)
        ensure_eligible(worker, work_date, action="mark attendance")

        record, created = self._attendance.upsert(
            worker_id=worker.worker_id,
            work_date=work_date,
            status=data.status,
            check_in=data.check_in,
            check_out=data.check_out,
            hours_worked=worked_hours(data.check_in, data.check_out),
            overtime_hours=evaluate_overtime(data.check_in, data.check_out, data.display_status),
            project_id=project_id,
            notes=(notes or "").strip() or None,
        )
        logger.info(
            "Attendance %s for worker %s on %s: %s",
            "created" if created else "updated",
            worker.worker_id,
            work_date.isoformat(),
            record.display_status.value,
        )
        return record, created

    def _get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise AttendanceNotFoundError(f"Attendance record {attendance_id} not found")
        return record

    def delete(self, attendance_id: int) -> None:
        record = self._get_record(attendance_id)
        worker = self._worker_service.get_worker(record.worker_id)
        ensure_eligible(worker, record.work_date, action="delete attendance")
        self._attendance.delete(record.attendance_id)
        logger.info("Attendance %s deleted (worker %s, %s)", record.attendance_id, worker.worker_id, record.work_date)

    def approve_overtime(self, attendance_id: int, *, approved: bool = True) -> AttendanceRecord:
        """Only approved overtime counts toward payable amounts."""

        record = self._get_record(attendance_id)
        if record.overtime_hours <= 0:
            raise ValidationError("This day has no overtime to approve", field="overtime_hours")
        worker = self._worker_service.get_worker(record.worker_id)
        ensure_eligible(worker, record.work_date, action="approve overtime")
        self._attendance.set_overtime_approval(attendance_id=record.attendance_id, approved=bool(approved))
        return self._get_record(record.attendance_id)

    def day_sheet(self, work_date: date) -> DaySheet:
        workers = self._workers.list_workers()
        records = {
            r.worker_id: r
            for r in self._attendance.list_for_range(start_date=work_date, end_date=work_date)
        }

        sheet = DaySheet(work_date=work_date)
        for w in workers:
            record = records.get(w.worker_id)
            display = record.display_status if record else DisplayStatus.NOT_MARKED
            reason = cutoff_reason(w, work_date)
            if reason is None:
                sheet.rows.append(DaySheetRow(w.worker_id, w.full_name, display, record))
            else:
                sheet.hidden.append(
                    DaySheetRow(w.worker_id, w.full_name, display, record, editable=False, reason=reason)
                )
        return sheet

    def list_for_worker(
        self,
        worker_id: int,
        *,
        start: date,
        end: date,
        include_inactive: bool = False,
    ) -> list[AttendanceRecord]:
        """The worker's records over [start, end], oldest first.

        Records dated on or after an inactive cut-off stay stored but are left
        out unless `include_inactive` is set. A worker made inactive without a
        cut-off date keeps their history visible.
        """

        if end < start:
            raise ValidationError("End date must not be before start date", field="end")
        worker = self._worker_service.get_worker(worker_id)
        records = self._attendance.list_for_range(start_date=start, end_date=end, worker_ids=[worker.worker_id])
        if include_inactive or worker.is_active or worker.inactive_from is None:
            return list(records)
        return [r for r in records if r.work_date < worker.inactive_from]

    def stats(self, *, start: date, end: date, worker_id: Optional[int] = None) -> AttendanceStats:
        """Status counts and hour totals over [start, end]."""

        if end < start:
            raise ValidationError("End date must not be before start date", field="end")
        worker_ids = None
        if worker_id is not None:
            worker_ids = [self._worker_service.get_worker(worker_id).worker_id]
        records = self._attendance.list_for_range(start_date=start, end_date=end, worker_ids=worker_ids)

        counts = Counter(r.status for r in records)
        return AttendanceStats(
            start=start,
            end=end,
            total_records=len(records),
            present_count=counts[AttendanceStatus.PRESENT],
            absent_count=counts[AttendanceStatus.ABSENT],
            half_day_count=counts[AttendanceStatus.HALF_DAY],
            on_leave_count=counts[AttendanceStatus.ON_LEAVE],
            overtime_days=sum(1 for r in records if r.display_status == DisplayStatus.OVERTIME),
            total_hours_worked=money_sum(r.hours_worked for r in records),
            total_overtime_hours=money_sum(r.overtime_hours for r in records),
        )
