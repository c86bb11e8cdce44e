from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence, Tuple

from ..common.money import round2
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_time_to_hhmm
from .model import AttendanceRecord
from .repository import AttendanceRepository

ATTENDANCE_COLUMNS = """
    attendance_id, worker_id, work_date, status, check_in, check_out,
    hours_worked, overtime_hours, is_approved, project_id, notes
"""


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        worker_id=int(r["worker_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in=mysql_time_to_hhmm(r.get("check_in")),
        check_out=mysql_time_to_hhmm(r.get("check_out")),
        hours_worked=round2(r.get("hours_worked")),
        overtime_hours=round2(r.get("overtime_hours")),
        is_approved=bool(r.get("is_approved")),
        project_id=int(r["project_id"]) if r.get("project_id") is not None else None,
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {ATTENDANCE_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_worker_and_date(self, worker_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {ATTENDANCE_COLUMNS} FROM attendance_records WHERE worker_id=%s AND work_date=%s",
                (int(worker_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            # is_approved is assigned before overtime_hours so it compares against the old value.
            cur.execute(
                """
                INSERT INTO attendance_records
                    (worker_id, work_date, status, check_in, check_out, hours_worked, overtime_hours, project_id, notes)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    is_approved = IF(overtime_hours = VALUES(overtime_hours), is_approved, 0),
                    status = VALUES(status),
                    check_in = VALUES(check_in),
                    check_out = VALUES(check_out),
                    hours_worked = VALUES(hours_worked),
                    overtime_hours = VALUES(overtime_hours),
                    project_id = VALUES(project_id),
                    notes = VALUES(notes)
                """,
                (
                    int(worker_id),
                    work_date,
                    status.value,
                    check_in,
                    check_out,
                    hours_worked,
                    overtime_hours,
                    project_id,
                    notes,
                ),
            )
            # MySQL reports 1 affected row for an insert, 2 for an update.
            created = cur.rowcount == 1
            cur.execute(
                f"SELECT {ATTENDANCE_COLUMNS} FROM attendance_records WHERE worker_id=%s AND work_date=%s",
                (int(worker_id), work_date),
            )
            return _row_to_record(fetchone(cur)), created

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def set_overtime_approval(self, *, attendance_id: int, approved: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET is_approved=%s WHERE attendance_id=%s",
                (1 if approved else 0, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if worker_ids is not None:
            ids = [int(i) for i in worker_ids]
            if not ids:
                return []
            clauses.append(f"worker_id IN ({','.join(['%s'] * len(ids))})")
            params.extend(ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ATTENDANCE_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date ASC, worker_id ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
