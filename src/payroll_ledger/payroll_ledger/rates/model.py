from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SalaryBreakdown:
    """Derived rates for one pay configuration, each rounded to 2 dp."""

    daily_rate: Decimal
    monthly_rate: Decimal
    hourly_rate: Decimal
    overtime_rate: Decimal

    def to_dict(self) -> dict:
        return {
            "dailyRate": float(self.daily_rate),
            "monthlyRate": float(self.monthly_rate),
            "hourlyRate": float(self.hourly_rate),
            "overtimeRate": float(self.overtime_rate),
        }
