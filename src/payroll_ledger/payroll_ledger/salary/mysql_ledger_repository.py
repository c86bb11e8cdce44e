from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..common.money import round2
from ..core.enums import PaymentEntryType
from ..core.exceptions import AlreadyVoidedError, ConcurrencyConflictError, WorkerNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyPayment, LedgerMutation, OvertimePayment, PaymentEntry
from .repository import LedgerRepository

PAYMENT_COLUMNS = """
    payment_id, worker_id, type, pay_date, days_paid,
    amount_gross, advance_deducted, daily_deduction, overtime_payments_total, net_amount,
    advance_balance_before, advance_balance_after,
    note, is_voided, void_reason, voided_at, created_at
"""


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_details(cur, payment_ids: List[int]) -> tuple[dict, dict]:
        daily: Dict[int, list] = {}
        overtime: Dict[int, list] = {}
        if not payment_ids:
            return daily, overtime
        placeholders = ",".join(["%s"] * len(payment_ids))

        cur.execute(
            f"""
            SELECT payment_id, work_date, amount
            FROM salary_payment_daily_details
            WHERE payment_id IN ({placeholders})
            ORDER BY detail_id ASC
            """,
            tuple(payment_ids),
        )
        for r in fetchall(cur):
            daily.setdefault(int(r["payment_id"]), []).append(
                DailyPayment(work_date=r["work_date"], amount=round2(r["amount"]))
            )

        cur.execute(
            f"""
            SELECT payment_id, work_date, amount, hours
            FROM salary_payment_overtime_details
            WHERE payment_id IN ({placeholders})
            ORDER BY detail_id ASC
            """,
            tuple(payment_ids),
        )
        for r in fetchall(cur):
            overtime.setdefault(int(r["payment_id"]), []).append(
                OvertimePayment(work_date=r["work_date"], amount=round2(r["amount"]), hours=round2(r["hours"]))
            )
        return daily, overtime

    def _rows_to_entries(self, cur, rows: List[Dict[str, Any]]) -> List[PaymentEntry]:
        daily, overtime = self._load_details(cur, [int(r["payment_id"]) for r in rows])
        out = []
        for r in rows:
            pid = int(r["payment_id"])
            out.append(
                PaymentEntry(
                    entry_id=pid,
                    worker_id=int(r["worker_id"]),
                    type=PaymentEntryType(r["type"]),
                    pay_date=r["pay_date"],
                    amount_gross=round2(r["amount_gross"]),
                    advance_deducted=round2(r["advance_deducted"]),
                    daily_deduction=round2(r["daily_deduction"]),
                    overtime_payments_total=round2(r["overtime_payments_total"]),
                    net_amount=round2(r["net_amount"]),
                    advance_balance_before=round2(r["advance_balance_before"]),
                    advance_balance_after=round2(r["advance_balance_after"]),
                    sequence=pid,
                    days_paid=int(r["days_paid"]) if r.get("days_paid") is not None else None,
                    daily_payment_details=tuple(daily.get(pid, [])),
                    overtime_payment_details=tuple(overtime.get(pid, [])),
                    note=r.get("note"),
                    voided=bool(r.get("is_voided")),
                    void_reason=r.get("void_reason"),
                    voided_at=r.get("voided_at"),
                    created_at=r.get("created_at"),
                )
            )
        return out

    def get_entry(self, entry_id: int) -> Optional[PaymentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {PAYMENT_COLUMNS} FROM salary_payments WHERE payment_id=%s", (int(entry_id),))
            r = fetchone(cur)
            if not r:
                return None
            return self._rows_to_entries(cur, [r])[0]

    def list_entries(self, worker_id: int) -> Sequence[PaymentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {PAYMENT_COLUMNS}
                FROM salary_payments
                WHERE worker_id=%s
                ORDER BY pay_date ASC, payment_id ASC
                """,
                (int(worker_id),),
            )
            return self._rows_to_entries(cur, fetchall(cur))

    def history(self, worker_id: int, *, limit: int) -> Sequence[PaymentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {PAYMENT_COLUMNS}
                FROM salary_payments
                WHERE worker_id=%s AND is_voided=0
                ORDER BY pay_date DESC, payment_id DESC
                LIMIT %s
                """,
                (int(worker_id), int(limit)),
            )
            return self._rows_to_entries(cur, fetchall(cur))

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[PaymentEntry]:
        clauses = ["is_voided=0", "pay_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if worker_ids is not None:
            ids = [int(i) for i in worker_ids]
            if not ids:
                return []
            clauses.append(f"worker_id IN ({','.join(['%s'] * len(ids))})")
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {PAYMENT_COLUMNS}
                FROM salary_payments
                WHERE {' AND '.join(clauses)}
                ORDER BY pay_date ASC, payment_id ASC
                """,
                tuple(params),
            )
            return self._rows_to_entries(cur, fetchall(cur))

    @staticmethod
    def _insert_entry(cur, entry: PaymentEntry) -> int:
        cur.execute(
            """
            INSERT INTO salary_payments
                (worker_id, type, pay_date, days_paid, amount_gross, advance_deducted, daily_deduction,
                 overtime_payments_total, net_amount, advance_balance_before, advance_balance_after,
                 note, created_at)
            VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                entry.worker_id,
                entry.type.value,
                entry.pay_date,
                entry.days_paid,
                entry.amount_gross,
                entry.advance_deducted,
                entry.daily_deduction,
                entry.overtime_payments_total,
                entry.net_amount,
                entry.advance_balance_before,
                entry.advance_balance_after,
                entry.note,
                entry.created_at,
            ),
        )
        payment_id = int(cur.lastrowid)
        for d in entry.daily_payment_details:
            cur.execute(
                "INSERT INTO salary_payment_daily_details (payment_id, work_date, amount) VALUES (%s,%s,%s)",
                (payment_id, d.work_date, d.amount),
            )
        for o in entry.overtime_payment_details:
            cur.execute(
                "INSERT INTO salary_payment_overtime_details (payment_id, work_date, amount, hours) VALUES (%s,%s,%s,%s)",
                (payment_id, o.work_date, o.amount, o.hours),
            )
        return payment_id

    def commit(self, mutation: LedgerMutation) -> Optional[int]:
        new_id: Optional[int] = None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT ledger_version FROM workers WHERE worker_id=%s FOR UPDATE",
                (int(mutation.worker_id),),
            )
            row = fetchone(cur)
            if not row:
                raise WorkerNotFoundError(f"Worker {mutation.worker_id} not found")
            if int(row["ledger_version"]) != int(mutation.expected_version):
                raise ConcurrencyConflictError(
                    f"Ledger of worker {mutation.worker_id} changed during the operation"
                )

            if mutation.new_entry is not None:
                new_id = self._insert_entry(cur, mutation.new_entry.entry)

            if mutation.metadata is not None:
                cur.execute(
                    "UPDATE salary_payments SET pay_date=%s, note=%s WHERE payment_id=%s AND is_voided=0",
                    (mutation.metadata.pay_date, mutation.metadata.note, mutation.metadata.entry_id),
                )

            if mutation.void is not None:
                cur.execute(
                    """
                    UPDATE salary_payments
                    SET is_voided=1, void_reason=%s, voided_at=%s
                    WHERE payment_id=%s AND is_voided=0
                    """,
                    (mutation.void.reason, mutation.void.voided_at, mutation.void.entry_id),
                )
                if cur.rowcount == 0:
                    raise AlreadyVoidedError("Payment already voided")

            for s in mutation.snapshots:
                target_id = new_id if s.entry_id == 0 else s.entry_id
                cur.execute(
                    """
                    UPDATE salary_payments
                    SET advance_balance_before=%s, advance_balance_after=%s
                    WHERE payment_id=%s
                    """,
                    (s.before, s.after, target_id),
                )

            cur.execute(
                """
                UPDATE workers
                SET advance_balance=%s, ledger_version=ledger_version+1
                WHERE worker_id=%s
                """,
                (mutation.final_balance, int(mutation.worker_id)),
            )
        return new_id
