from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_WORKING_DAYS_PER_MONTH, DEFAULT_WORKING_HOURS_PER_DAY
from ..core.enums import PaymentType, WorkerStatus
from ..rates.calculator import calculate_salary_breakdown
from ..rates.model import SalaryBreakdown


@dataclass(frozen=True)
class WorkerPayConfig:
    """Pay configuration; only `base_salary` is stored, rates are derived.

    `base_salary` is the daily rate for Daily workers and the monthly salary
    for Monthly workers.
    """

    payment_type: PaymentType
    base_salary: Decimal
    working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH
    working_hours_per_day: Decimal = Decimal(DEFAULT_WORKING_HOURS_PER_DAY)

    @property
    def breakdown(self) -> SalaryBreakdown:
        return calculate_salary_breakdown(
            self.payment_type,
            self.base_salary,
            self.working_days_per_month,
            self.working_hours_per_day,
        )

    @property
    def daily_rate(self) -> Decimal:
        return self.breakdown.daily_rate

    @property
    def monthly_rate(self) -> Decimal:
        return self.breakdown.monthly_rate

    @property
    def hourly_rate(self) -> Decimal:
        return self.breakdown.hourly_rate

    @property
    def overtime_rate(self) -> Decimal:
        return self.breakdown.overtime_rate


@dataclass(frozen=True)
class Worker:
    """Thực thể miền (domain): Worker.

    `advance_balance` is the live cached result of replaying the worker's
    ledger from `opening_advance_balance`. `ledger_version` increases on every
    ledger mutation and guards against lost updates across processes.
    """

    worker_id: int
    full_name: str
    pay: WorkerPayConfig
    status: WorkerStatus = WorkerStatus.ACTIVE
    inactive_from: Optional[date] = None
    join_date: Optional[date] = None
    advance_balance: Decimal = Decimal("0.00")
    opening_advance_balance: Decimal = Decimal("0.00")
    ledger_version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == WorkerStatus.ACTIVE
