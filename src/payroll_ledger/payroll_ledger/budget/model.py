from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..common.money import round2


@dataclass(frozen=True)
class Project:
    project_id: int
    name: str
    total_budget: Decimal
    start_date: date
    end_date: Optional[date] = None
    worker_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class MaterialCost:
    material_id: int
    project_id: int
    name: str
    quantity: Decimal
    unit_price: Decimal
    purchase_date: Optional[date] = None

    @property
    def total_amount(self) -> Decimal:
        return round2(self.quantity * self.unit_price)


@dataclass(frozen=True)
class OtherCost:
    cost_id: int
    project_id: int
    description: str
    amount: Decimal
    cost_date: Optional[date] = None


@dataclass(frozen=True)
class WorkerSalaryRow:
    """Read-only payable derived from attendance; never stored."""

    worker_id: int
    full_name: str
    payment_type: str
    present_days: int
    half_days: int
    days_worked: Decimal
    approved_overtime_hours: Decimal
    daily_rate: Decimal
    overtime_rate: Decimal
    payable: Decimal

    def to_dict(self) -> dict:
        return {
            "workerId": self.worker_id,
            "name": self.full_name,
            "paymentType": self.payment_type,
            "presentDays": self.present_days,
            "halfDays": self.half_days,
            "daysWorked": float(self.days_worked),
            "approvedOvertimeHours": float(self.approved_overtime_hours),
            "dailyRate": float(self.daily_rate),
            "overtimeRate": float(self.overtime_rate),
            "payable": float(self.payable),
        }


@dataclass(frozen=True)
class WorkerSalarySummary:
    start: date
    end: date
    rows: list[WorkerSalaryRow] = field(default_factory=list)

    @property
    def total_payable(self) -> Decimal:
        return round2(sum((r.payable for r in self.rows), Decimal("0")))

    def to_dict(self) -> dict:
        return {
            "range": {"start": format_iso_date(self.start), "endInclusive": format_iso_date(self.end)},
            "rows": [r.to_dict() for r in self.rows],
            "totalPayable": float(self.total_payable),
        }


@dataclass(frozen=True)
class ProjectBudgetSummary:
    project_id: int
    name: str
    total_budget: Decimal
    materials_total: Decimal
    other_costs_total: Decimal
    worker_salary_summary: WorkerSalarySummary

    @property
    def salaries_total(self) -> Decimal:
        return self.worker_salary_summary.total_payable

    @property
    def spent(self) -> Decimal:
        return round2(self.materials_total + self.other_costs_total + self.salaries_total)

    @property
    def remaining(self) -> Decimal:
        return round2(self.total_budget - self.spent)

    def to_dict(self) -> dict:
        return {
            "projectId": self.project_id,
            "name": self.name,
            "totalBudget": float(self.total_budget),
            "spent": float(self.spent),
            "remaining": float(self.remaining),
            "breakdown": {
                "materials": float(self.materials_total),
                "otherCosts": float(self.other_costs_total),
                "salaries": float(self.salaries_total),
            },
            "workerSalarySummary": self.worker_salary_summary.to_dict(),
        }
