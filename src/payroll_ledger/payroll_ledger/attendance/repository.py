from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_worker_and_date(self, worker_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        worker_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in: Optional[str],
        check_out: Optional[str],
        hours_worked: Decimal,
        overtime_hours: Decimal,
        project_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Tuple[AttendanceRecord, bool]:
        """Insert or replace the (worker, date) record; returns (record, created).

        Overtime approval survives an update only if the overtime hours are unchanged.
        """

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def set_overtime_approval(self, *, attendance_id: int, approved: bool) -> bool:
        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
