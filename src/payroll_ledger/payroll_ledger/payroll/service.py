from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.money import money_sum
from ..core.enums import PaymentEntryType, PayrollStatus
from ..core.exceptions import ValidationError
from ..salary.repository import LedgerRepository
from ..workers.repository import WorkerRepository
from ..workers.service import WorkerService
from .earnings import active_window, compute_earnings
from .model import PayrollReport, PayrollRow

# Advances are loans, not salary, so they do not settle a period.
SETTLING_TYPES = {PaymentEntryType.FULL, PaymentEntryType.PARTIAL, PaymentEntryType.ADHOC}


def compute_status(gross: Decimal, paid: Decimal) -> PayrollStatus:
    if gross > 0 and paid >= gross:
        return PayrollStatus.PAID
    if paid > 0 and paid < gross:
        return PayrollStatus.PARTIAL
    return PayrollStatus.PENDING


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        ledger: LedgerRepository,
    ):
        self._attendance = attendance
        self._workers = workers
        self._worker_service = WorkerService(workers)
        self._ledger = ledger

    def build_period_report(
        self,
        *,
        start: date,
        end: date,
        worker_id: Optional[int] = None,
    ) -> PayrollReport:
        """Earnings vs. payments per worker for [start, end].

        Workers never eligible inside the period are left out.
        """

        if end < start:
            raise ValidationError("End date must not be before start date", field="end")

        if worker_id is not None:
            workers = [self._worker_service.get_worker(worker_id)]
        else:
            workers = list(self._workers.list_workers())
        workers = [w for w in workers if active_window(w, start, end) is not None]

        ids = [w.worker_id for w in workers]
        records = self._attendance.list_for_range(start_date=start, end_date=end, worker_ids=ids)
        paid_by_worker: dict[int, list[Decimal]] = {}
        for p in self._ledger.list_for_range(start_date=start, end_date=end, worker_ids=ids):
            if p.type in SETTLING_TYPES and not p.voided:
                paid_by_worker.setdefault(p.worker_id, []).append(p.net_amount)

        rows = []
        for w in workers:
            e = compute_earnings(w, records, start=start, end=end)
            paid = money_sum(paid_by_worker.get(w.worker_id, []))
            rows.append(
                PayrollRow(
                    worker_id=w.worker_id,
                    full_name=w.full_name,
                    payment_type=w.pay.payment_type.value,
                    days_worked=e.days_worked,
                    overtime_hours=e.approved_overtime_hours,
                    base_amount=e.base_amount,
                    overtime_amount=e.overtime_amount,
                    gross=e.total,
                    paid=paid,
                    status=compute_status(e.total, paid),
                )
            )
        rows.sort(key=lambda r: r.full_name.lower())
        return PayrollReport(start=start, end=end, rows=rows)
