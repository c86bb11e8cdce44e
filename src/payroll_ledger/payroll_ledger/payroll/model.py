from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ..common.datetime_utils import format_iso_date
from ..common.money import round2
from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollRow:
    worker_id: int
    full_name: str
    payment_type: str
    days_worked: Decimal
    overtime_hours: Decimal
    base_amount: Decimal
    overtime_amount: Decimal
    gross: Decimal
    paid: Decimal
    status: PayrollStatus

    @property
    def outstanding(self) -> Decimal:
        return round2(max(self.gross - self.paid, Decimal("0")))

    def to_dict(self) -> dict:
        return {
            "workerId": self.worker_id,
            "name": self.full_name,
            "paymentType": self.payment_type,
            "daysWorked": float(self.days_worked),
            "overtime": {"hours": float(self.overtime_hours), "amount": float(self.overtime_amount)},
            "baseAmount": float(self.base_amount),
            "grossSalary": float(self.gross),
            "paidAmount": float(self.paid),
            "outstanding": float(self.outstanding),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class PayrollReport:
    start: date
    end: date
    rows: list[PayrollRow] = field(default_factory=list)

    def totals(self) -> dict:
        return {
            "workers": len(self.rows),
            "totalGross": float(round2(sum((r.gross for r in self.rows), Decimal("0")))),
            "totalPaid": float(round2(sum((r.paid for r in self.rows), Decimal("0")))),
            "totalOTHours": float(round2(sum((r.overtime_hours for r in self.rows), Decimal("0")))),
            "totalOTAmount": float(round2(sum((r.overtime_amount for r in self.rows), Decimal("0")))),
            "paid": sum(1 for r in self.rows if r.status == PayrollStatus.PAID),
            "partial": sum(1 for r in self.rows if r.status == PayrollStatus.PARTIAL),
            "pending": sum(1 for r in self.rows if r.status == PayrollStatus.PENDING),
        }

    def to_dict(self) -> dict:
        return {
            "range": {"start": format_iso_date(self.start), "end": format_iso_date(self.end)},
            "rows": [r.to_dict() for r in self.rows],
            "totals": self.totals(),
        }
