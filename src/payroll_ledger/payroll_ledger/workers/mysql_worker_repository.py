from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.money import round2, to_decimal
from ..core.enums import PaymentType, WorkerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Worker, WorkerPayConfig
from .repository import WorkerRepository

WORKER_COLUMNS = """
    worker_id, full_name, status, inactive_from, join_date,
    payment_type, base_salary, working_days_per_month, working_hours_per_day,
    advance_balance, opening_advance_balance, ledger_version
"""


def row_to_worker(r: Dict[str, Any]) -> Worker:
    return Worker(
        worker_id=int(r["worker_id"]),
        full_name=r["full_name"],
        pay=WorkerPayConfig(
            payment_type=PaymentType(r["payment_type"]),
            base_salary=round2(r["base_salary"]),
            working_days_per_month=int(r.get("working_days_per_month") or 0),
            working_hours_per_day=to_decimal(r.get("working_hours_per_day")),
        ),
        status=WorkerStatus(r["status"]),
        inactive_from=r.get("inactive_from"),
        join_date=r.get("join_date"),
        advance_balance=round2(r.get("advance_balance")),
        opening_advance_balance=round2(r.get("opening_advance_balance")),
        ledger_version=int(r.get("ledger_version") or 0),
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {WORKER_COLUMNS} FROM workers WHERE worker_id=%s", (int(worker_id),))
            r = fetchone(cur)
            return row_to_worker(r) if r else None

    def list_workers(self, *, worker_ids: Optional[Sequence[int]] = None) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            if worker_ids is None:
                cur.execute(f"SELECT {WORKER_COLUMNS} FROM workers ORDER BY worker_id ASC")
            else:
                ids = [int(i) for i in worker_ids]
                if not ids:
                    return []
                placeholders = ",".join(["%s"] * len(ids))
                cur.execute(
                    f"SELECT {WORKER_COLUMNS} FROM workers WHERE worker_id IN ({placeholders}) ORDER BY worker_id ASC",
                    tuple(ids),
                )
            return [row_to_worker(r) for r in fetchall(cur)]
